from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from src.domain.entities.image import ImageRecord
from src.domain.errors import ConflictError
from src.infrastructure.database.repositories.serialization import record_to_dict, row_to_record

logger = logging.getLogger(__name__)

DATA_FILE_NAME = "images.json"


class JsonImageRepository:
    """Metadata store backed by a single JSON snapshot file.

    The snapshot is loaded once when the repository is constructed and
    rewritten in full after every mutation. Records are immutable, so ``get``
    can hand out the cached instance.
    """

    def __init__(self, base_path: str | Path, file_name: str = DATA_FILE_NAME) -> None:
        self.data_file = Path(base_path) / file_name
        self._images: dict[str, ImageRecord] = self._load_from_disk()
        self._lock = asyncio.Lock()

    def _load_from_disk(self) -> dict[str, ImageRecord]:
        if not self.data_file.exists():
            return {}
        text = self.data_file.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        rows = json.loads(text)
        return {image_id: row_to_record(row) for image_id, row in rows.items()}

    def _save_to_disk(self, snapshot: dict[str, dict]) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.data_file.with_name(self.data_file.name + ".tmp")
        tmp.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
        os.replace(tmp, self.data_file)

    async def _commit(self, images: dict[str, ImageRecord]) -> None:
        # In-memory state only changes once the snapshot is on disk
        snapshot = {image_id: record_to_dict(rec) for image_id, rec in images.items()}
        await asyncio.to_thread(self._save_to_disk, snapshot)
        self._images = images

    async def insert(self, record: ImageRecord) -> None:
        async with self._lock:
            if record.id in self._images:
                raise ConflictError(f"Image {record.id} already exists")
            await self._commit({**self._images, record.id: record})

    async def get(self, image_id: str) -> ImageRecord | None:
        return self._images.get(image_id)

    async def update(self, record: ImageRecord) -> None:
        async with self._lock:
            await self._commit({**self._images, record.id: record})

    async def delete(self, image_id: str) -> None:
        async with self._lock:
            if image_id not in self._images:
                logger.debug("Delete for unknown image %s ignored", image_id)
                return
            remaining = {k: v for k, v in self._images.items() if k != image_id}
            await self._commit(remaining)
