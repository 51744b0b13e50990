from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from src.domain.errors import NotFoundError
from src.infrastructure.database.repositories.base import ImageRepository

logger = logging.getLogger(__name__)


@dataclass
class GetOriginalImageUseCase:
    image_repo: ImageRepository

    async def execute(self, image_id: str) -> str:
        record = await self.image_repo.get(image_id)
        if record is None:
            raise NotFoundError("Image not found.")

        path = record.original.path
        if not await asyncio.to_thread(Path(path).is_file):
            logger.error("Metadata for image %s points at a missing original file", image_id)
            raise NotFoundError("Original image file does not exist.")
        return path
