from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.entities.image import ImageRecord, Variation


class VariationMetadata(BaseModel):
    """A stored artifact of an image at one height."""
    height: int = Field(..., description="Height of the artifact in pixels", examples=[720], gt=0)
    width: int = Field(..., description="Width preserving the original aspect ratio", examples=[1280], gt=0)
    path: str = Field(..., description="Storage path of the artifact", examples=["images/3f2a.../720px.png"])

    @classmethod
    def from_entity(cls, variation: Variation) -> VariationMetadata:
        return cls(height=variation.height, width=variation.width, path=variation.path)


class ImageMetadata(BaseModel):
    """Metadata record for an uploaded image and its variations."""
    id: str = Field(..., description="Unique identifier of the image", examples=["3f2a9c4e8b7d4f6a9e1c2b3d4e5f6a7b"])
    original: VariationMetadata = Field(..., description="Dimensions and path of the uploaded file")
    variations: list[VariationMetadata] = Field(default_factory=list, description="Derived variations, in creation order")
    uploaded_at: datetime = Field(..., description="ISO timestamp when the image was uploaded")
    byte_size: int = Field(..., description="Size of the uploaded file in bytes", examples=[2048576], ge=0)
    content_type: str = Field(..., description="Content type declared at upload", examples=["image/png"])

    @classmethod
    def from_entity(cls, record: ImageRecord) -> ImageMetadata:
        return cls(
            id=record.id,
            original=VariationMetadata.from_entity(record.original),
            variations=[VariationMetadata.from_entity(v) for v in record.variations],
            uploaded_at=record.uploaded_at,
            byte_size=record.byte_size,
            content_type=record.content_type,
        )


class UploadImageResponse(BaseModel):
    """Response model for successful image upload."""
    image_id: str = Field(..., description="Identifier assigned to the uploaded image")


class DeleteImageResponse(BaseModel):
    """Response model for image deletion."""
    ok: bool = Field(True, description="Indicates whether the deletion was successful")
