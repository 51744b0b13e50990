from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from src.domain.entities.image import ImageRecord, Variation
from src.domain.errors import ConfigError, ValidationError
from src.domain.services.aspect_ratio_catalog import catalog_heights, load_catalog
from src.domain.services.variation_service import VariationService
from src.infrastructure.database.repositories.base import ImageRepository

logger = logging.getLogger(__name__)

THUMBNAIL_HEIGHT = 160


@dataclass
class UploadImageUseCase:
    image_repo: ImageRepository
    base_path: Path
    catalog_path: Path
    variations: VariationService = field(default_factory=VariationService)

    async def execute(self, data: bytes, filename: str | None, content_type: str | None) -> str:
        """
        Store a new upload and pre-generate its variations.

        Every catalog height below the original height gets a variation, plus a
        160px thumbnail when the catalog does not already provide one.

        Returns:
            The id of the new image.

        Raises:
            ValidationError: If the payload is empty or not a decodable image.
        """
        if not data:
            raise ValidationError("No file uploaded.")

        image_id = uuid.uuid4().hex
        image_dir = Path(self.base_path) / image_id
        await asyncio.to_thread(image_dir.mkdir, parents=True, exist_ok=False)

        try:
            width, height, fmt = await asyncio.to_thread(self.variations.read_dimensions, data)
        except ValidationError:
            await asyncio.to_thread(shutil.rmtree, image_dir, ignore_errors=True)
            raise

        extension = self._extension_for(filename, fmt)
        original_path = image_dir / f"original{extension}"
        await asyncio.to_thread(self.variations.write_artifact, original_path, data)

        produced = await asyncio.to_thread(
            self._materialize_all, data, image_dir, extension, width, height
        )

        record = ImageRecord(
            id=image_id,
            original=Variation(height=height, width=width, path=str(original_path)),
            variations=tuple(produced),
            uploaded_at=datetime.now(UTC),
            byte_size=len(data),
            content_type=content_type or "application/octet-stream",
        )
        await self.image_repo.insert(record)
        logger.info("Image %s uploaded with %d variations", image_id, len(produced))
        return image_id

    def _candidate_heights(self) -> list[int]:
        try:
            return catalog_heights(load_catalog(self.catalog_path))
        except ConfigError as exc:
            logger.warning("Aspect ratio catalog unavailable, using thumbnail only: %s", exc)
            return []

    def _materialize_all(
        self, data: bytes, image_dir: Path, extension: str, width: int, height: int
    ) -> list[Variation]:
        produced: list[Variation] = []
        seen: set[int] = set()
        for target in [*self._candidate_heights(), THUMBNAIL_HEIGHT]:
            if target >= height or target in seen:
                continue
            produced.append(
                self.variations.materialize_variation(data, image_dir, extension, target, width, height)
            )
            seen.add(target)
        return produced

    @staticmethod
    def _extension_for(filename: str | None, fmt: str | None) -> str:
        suffix = Path(filename or "").suffix.lower()
        if suffix:
            return suffix
        # No usable extension on the upload, fall back to the decoded format
        return f".{fmt.lower()}" if fmt else ".bin"
