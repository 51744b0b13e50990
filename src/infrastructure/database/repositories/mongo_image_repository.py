from __future__ import annotations

from typing import Any

from pymongo.errors import DuplicateKeyError

from src.domain.entities.image import ImageRecord
from src.domain.errors import ConflictError
from src.infrastructure.database.repositories.serialization import record_to_dict, row_to_record

COLLECTION_NAME = "Images"


class MongoImageRepository:
    """Metadata store backed by a MongoDB collection (one document per image)."""

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    @classmethod
    def from_database(cls, database: Any, collection_name: str = COLLECTION_NAME) -> MongoImageRepository:
        return cls(database[collection_name])

    @staticmethod
    def _to_document(record: ImageRecord) -> dict[str, Any]:
        doc = record_to_dict(record)
        doc["_id"] = doc.pop("id")
        # BSON has a native datetime type
        doc["uploaded_at"] = record.uploaded_at
        return doc

    async def insert(self, record: ImageRecord) -> None:
        try:
            await self.collection.insert_one(self._to_document(record))
        except DuplicateKeyError as exc:
            raise ConflictError(f"Image {record.id} already exists") from exc

    async def get(self, image_id: str) -> ImageRecord | None:
        doc = await self.collection.find_one({"_id": image_id})
        if doc is None:
            return None
        return row_to_record(doc)

    async def update(self, record: ImageRecord) -> None:
        await self.collection.replace_one({"_id": record.id}, self._to_document(record))

    async def delete(self, image_id: str) -> None:
        await self.collection.delete_one({"_id": image_id})
