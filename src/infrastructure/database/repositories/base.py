from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.domain.entities.image import ImageRecord


@runtime_checkable
class ImageRepository(Protocol):
    """Metadata store contract used by the image use cases.

    Implementations must give read-after-write consistency per id.
    """

    async def insert(self, record: ImageRecord) -> None:
        """Store a new record. Raises ConflictError if the id already exists."""
        ...

    async def get(self, image_id: str) -> ImageRecord | None:
        ...

    async def update(self, record: ImageRecord) -> None:
        """Replace the stored record with the same id (last writer wins)."""
        ...

    async def delete(self, image_id: str) -> None:
        """Remove the record. Deleting an unknown id is a no-op."""
        ...
