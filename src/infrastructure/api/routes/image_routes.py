from __future__ import annotations

import logging
from pathlib import Path as FsPath

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, UploadFile, status
from fastapi.responses import FileResponse

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.image_dto import DeleteImageResponse, ImageMetadata, UploadImageResponse
from src.application.use_cases.delete_image import DeleteImageUseCase
from src.application.use_cases.get_image_metadata import GetImageMetadataUseCase
from src.application.use_cases.get_image_variation import GetImageVariationUseCase
from src.application.use_cases.get_original_image import GetOriginalImageUseCase
from src.application.use_cases.upload_image import UploadImageUseCase
from src.domain.errors import InvalidRequestError, NotFoundError, ValidationError
from src.infrastructure.api.dependencies import (
    get_delete_use_case,
    get_metadata_use_case,
    get_original_use_case,
    get_upload_use_case,
    get_variation_use_case,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/images",
    tags=["Images"],
    responses={
        404: {"model": ErrorResponse, "description": "Not Found - Image does not exist or its file is missing on disk"},
        422: {"description": "Validation Error - Invalid request format"},
        500: {"model": ErrorResponse, "description": "Internal Server Error - Storage failure"},
    },
)

_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
}


def _content_type_for(path: str) -> str:
    return _CONTENT_TYPES.get(FsPath(path).suffix.lower(), "application/octet-stream")


@router.post(
    "/upload",
    response_model=UploadImageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Image",
    description="""
    Upload a new image file.

    The original is stored as-is and a variation is generated for every
    catalog height below the original height, plus a 160px thumbnail.
    """,
    response_description="Identifier of the uploaded image",
    responses={400: {"model": ErrorResponse, "description": "Bad Request - Empty file or not a valid image"}},
)
async def upload_image(
    file: UploadFile = File(..., description="Image file to upload"),
    uc: UploadImageUseCase = Depends(get_upload_use_case),
):
    """Upload a new image and pre-generate its variations."""
    data = await file.read()
    try:
        image_id = await uc.execute(data, file.filename, file.content_type)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OSError as exc:
        logger.exception("Failed to upload image")
        raise HTTPException(status_code=500, detail="Failed to upload image.") from exc
    return UploadImageResponse(image_id=image_id)


@router.get(
    "/{image_id}",
    summary="Download Original Image",
    response_description="Binary content of the original upload",
    responses={200: {"content": {"image/*": {}}, "description": "Image file content"}},
)
async def get_original_image(
    image_id: str,
    uc: GetOriginalImageUseCase = Depends(get_original_use_case),
):
    """Serve the originally uploaded file."""
    try:
        path = await uc.execute(image_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return FileResponse(path, media_type=_content_type_for(path))


@router.get(
    "/{image_id}/variation/{height}",
    summary="Download Image Variation",
    description="""
    Serve the variation of an image at the requested height.

    Missing variations are generated on first request and recorded in the
    image metadata. Heights above the original height are rejected.
    """,
    response_description="Binary content of the variation",
    responses={
        200: {"content": {"image/*": {}}, "description": "Image file content"},
        400: {"model": ErrorResponse, "description": "Bad Request - Requested height exceeds original image height"},
    },
)
async def get_image_variation(
    image_id: str,
    height: int = Path(..., gt=0, description="Target height in pixels"),
    uc: GetImageVariationUseCase = Depends(get_variation_use_case),
):
    """Serve (and lazily create) the variation at ``height``."""
    try:
        path = await uc.execute(image_id, height)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OSError as exc:
        logger.exception("Failed to generate variation %dpx for image %s", height, image_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve image variation.") from exc
    return FileResponse(path, media_type=_content_type_for(path))


@router.get(
    "/{image_id}/metadata",
    response_model=ImageMetadata,
    summary="Get Image Metadata",
    response_description="Stored metadata record of the image",
)
async def get_image_metadata(
    image_id: str,
    uc: GetImageMetadataUseCase = Depends(get_metadata_use_case),
):
    """Get the metadata record for an image."""
    try:
        record = await uc.execute(image_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ImageMetadata.from_entity(record)


@router.delete(
    "/{image_id}",
    response_model=DeleteImageResponse,
    summary="Delete Image",
    description="""
    Delete an image's files and its metadata record.

    With `missing_ok=true` an unknown id is treated as already deleted, which
    makes retries after a partial failure safe.
    """,
    response_description="Confirmation of successful deletion",
)
async def delete_image(
    image_id: str,
    missing_ok: bool = Query(False, description="Succeed when the image does not exist"),
    uc: DeleteImageUseCase = Depends(get_delete_use_case),
):
    """Delete an image and all of its variations."""
    try:
        await uc.execute(image_id, missing_ok=missing_ok)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OSError as exc:
        raise HTTPException(status_code=500, detail="Failed to delete image files from disk.") from exc
    return DeleteImageResponse(ok=True)
