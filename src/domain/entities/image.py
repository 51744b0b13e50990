from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class Variation:
    height: int
    width: int
    path: str  # {base_path}/{image_id}/{height}px{ext}, or original{ext} for the original


@dataclass(frozen=True)
class ImageRecord:
    id: str
    original: Variation
    uploaded_at: datetime
    byte_size: int
    content_type: str
    variations: tuple[Variation, ...] = field(default_factory=tuple)

    @property
    def directory(self) -> Path:
        return Path(self.original.path).parent

    @property
    def extension(self) -> str:
        return Path(self.original.path).suffix

    def find_variation(self, height: int) -> Variation | None:
        for variation in self.variations:
            if variation.height == height:
                return variation
        return None

    def with_variation(self, variation: Variation) -> ImageRecord:
        """Return a copy of this record with ``variation`` appended."""
        if variation.height == self.original.height or self.find_variation(variation.height):
            raise ValueError(f"Record {self.id} already has an entry at height {variation.height}")
        return replace(self, variations=(*self.variations, variation))
