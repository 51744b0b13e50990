from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from src.domain.entities.image import Variation
from src.domain.errors import ValidationError


class VariationService:
    """Derives height-keyed variations of an uploaded image.

    Width computation is pure; ``materialize_variation`` is the only method that
    touches the filesystem. A variation stores the source bytes unchanged under
    its canonical name and records the width that preserves the aspect ratio;
    no pixel resampling happens here.
    """

    # Width for a target height: round(h * W / H)
    @staticmethod
    def compute_width(original_width: int, original_height: int, target_height: int) -> int:
        if original_width <= 0 or original_height <= 0 or target_height <= 0:
            raise ValueError("Dimensions must be positive integers")
        return int(round(target_height * original_width / original_height))

    @staticmethod
    def variation_path(directory: str | Path, target_height: int, extension: str) -> Path:
        return Path(directory) / f"{target_height}px{extension}"

    @staticmethod
    def write_artifact(path: str | Path, data: bytes) -> None:
        Path(path).write_bytes(data)

    @staticmethod
    def read_dimensions(data: bytes) -> tuple[int, int, str | None]:
        """Decode ``data`` and return ``(width, height, pillow_format)``.

        Raises:
            ValidationError: If the payload is not an image Pillow can decode.
        """
        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()
                width, height = img.size
                fmt = img.format
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise ValidationError("The uploaded file is not a valid image.") from exc
        if width <= 0 or height <= 0:
            raise ValidationError("The uploaded file is not a valid image.")
        return width, height, fmt

    @classmethod
    def materialize_variation(
        cls,
        source: bytes,
        directory: str | Path,
        extension: str,
        target_height: int,
        original_width: int,
        original_height: int,
    ) -> Variation:
        width = cls.compute_width(original_width, original_height, target_height)
        path = cls.variation_path(directory, target_height, extension)
        cls.write_artifact(path, source)
        return Variation(height=target_height, width=width, path=str(path))
