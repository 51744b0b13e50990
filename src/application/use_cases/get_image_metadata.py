from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.image import ImageRecord
from src.domain.errors import NotFoundError
from src.infrastructure.database.repositories.base import ImageRepository


@dataclass
class GetImageMetadataUseCase:
    image_repo: ImageRepository

    async def execute(self, image_id: str) -> ImageRecord:
        record = await self.image_repo.get(image_id)
        if record is None:
            raise NotFoundError("Image not found.")
        return record
