from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.application.keyed_lock import KeyedLock
from src.domain.entities.image import ImageRecord
from src.domain.errors import InvalidRequestError, NotFoundError
from src.domain.services.variation_service import VariationService
from src.infrastructure.database.repositories.base import ImageRepository

logger = logging.getLogger(__name__)


@dataclass
class GetImageVariationUseCase:
    """
    Read-through cache of variations keyed by height.

    A missing height is materialized from the original file on first request
    and appended to the record; entries are never evicted. Materialization for
    one (image, height) pair is serialized through ``locks`` so concurrent
    requests write a single file and a single metadata entry; the final
    read-append-update step is additionally serialized per image.
    """

    image_repo: ImageRepository
    locks: KeyedLock
    variations: VariationService = field(default_factory=VariationService)

    async def execute(self, image_id: str, height: int) -> str:
        """
        Return the path of the variation at ``height``, creating it if needed.

        Raises:
            NotFoundError: If the image is unknown, or a file its metadata
                points at is missing on disk.
            InvalidRequestError: If ``height`` is not positive or exceeds the original.
        """
        record = await self._get_record(image_id)
        cached = self._lookup(record, height)
        if cached is not None:
            return await self._existing_file(image_id, cached)

        async with self.locks.hold((image_id, height)):
            # Another request may have produced it while we waited
            record = await self._get_record(image_id)
            cached = self._lookup(record, height)
            if cached is not None:
                return await self._existing_file(image_id, cached)

            source_path = Path(record.original.path)
            try:
                source = await asyncio.to_thread(source_path.read_bytes)
            except FileNotFoundError as exc:
                logger.error("Original file for image %s is missing on disk", image_id)
                raise NotFoundError("Original image file does not exist.") from exc

            variation = await asyncio.to_thread(
                self.variations.materialize_variation,
                source,
                record.directory,
                record.extension,
                height,
                record.original.width,
                record.original.height,
            )
            # Per-image section so appends for different heights do not overwrite each other
            async with self.locks.hold(image_id):
                record = await self._get_record(image_id)
                await self.image_repo.update(record.with_variation(variation))
            logger.info("Generated %dpx variation for image %s", height, image_id)
            return variation.path

    async def _get_record(self, image_id: str) -> ImageRecord:
        record = await self.image_repo.get(image_id)
        if record is None:
            raise NotFoundError("Image not found.")
        return record

    @staticmethod
    async def _existing_file(image_id: str, path: str) -> str:
        if not await asyncio.to_thread(Path(path).is_file):
            logger.error("Metadata for image %s points at missing file %s", image_id, path)
            raise NotFoundError("Image variation not found on disk.")
        return path

    @staticmethod
    def _lookup(record: ImageRecord, height: int) -> str | None:
        if height <= 0:
            raise InvalidRequestError("Requested height must be a positive integer.")
        if height > record.original.height:
            raise InvalidRequestError("Requested height exceeds original image height.")
        if height == record.original.height:
            return record.original.path
        existing = record.find_variation(height)
        return existing.path if existing is not None else None
