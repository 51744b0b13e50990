from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass

from src.domain.errors import NotFoundError
from src.infrastructure.database.repositories.base import ImageRepository

logger = logging.getLogger(__name__)


@dataclass
class DeleteImageUseCase:
    """
    Remove an image's directory and then its metadata.

    The two steps are independent: a failure between them can leave metadata
    without files (a retried delete then succeeds) or, if the metadata delete
    fails, files already gone.
    """

    image_repo: ImageRepository

    async def execute(self, image_id: str, *, missing_ok: bool = False) -> None:
        record = await self.image_repo.get(image_id)
        if record is None:
            if missing_ok:
                return
            raise NotFoundError("Image not found.")

        image_dir = record.directory
        if await asyncio.to_thread(image_dir.is_dir):
            try:
                await asyncio.to_thread(shutil.rmtree, image_dir)
            except OSError:
                logger.exception("I/O error while deleting files for image %s", image_id)
                raise
        else:
            logger.warning("Image folder for image %s does not exist on disk", image_id)

        await self.image_repo.delete(image_id)
        logger.info("Image %s deleted", image_id)
