from __future__ import annotations

from datetime import datetime
from typing import Any

from src.domain.entities.image import ImageRecord, Variation


def variation_to_dict(variation: Variation) -> dict[str, Any]:
    return {"height": variation.height, "width": variation.width, "path": variation.path}


def record_to_dict(record: ImageRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "original": variation_to_dict(record.original),
        "variations": [variation_to_dict(v) for v in record.variations],
        "uploaded_at": record.uploaded_at.isoformat(),
        "byte_size": record.byte_size,
        "content_type": record.content_type,
    }


def _row_to_variation(row: dict) -> Variation:
    return Variation(height=int(row["height"]), width=int(row["width"]), path=row["path"])


def row_to_record(row: dict) -> ImageRecord:
    """Convert a stored document back into an ImageRecord."""
    # JSON snapshots hold ISO strings, MongoDB hands back datetime objects
    uploaded_at = row["uploaded_at"]
    if isinstance(uploaded_at, str):
        uploaded_at = datetime.fromisoformat(uploaded_at)

    return ImageRecord(
        id=row.get("id") or row["_id"],
        original=_row_to_variation(row["original"]),
        variations=tuple(_row_to_variation(v) for v in row.get("variations", [])),
        uploaded_at=uploaded_at,
        byte_size=int(row["byte_size"]),
        content_type=row["content_type"],
    )
