from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.application.keyed_lock import KeyedLock
from src.application.use_cases.delete_image import DeleteImageUseCase
from src.application.use_cases.get_image_metadata import GetImageMetadataUseCase
from src.application.use_cases.get_image_variation import GetImageVariationUseCase
from src.application.use_cases.get_original_image import GetOriginalImageUseCase
from src.application.use_cases.upload_image import UploadImageUseCase
from src.infrastructure.config import AppSettings, get_settings
from src.infrastructure.database.mongo_client import get_mongo_database
from src.infrastructure.database.repositories.base import ImageRepository
from src.infrastructure.database.repositories.json_image_repository import JsonImageRepository
from src.infrastructure.database.repositories.mongo_image_repository import MongoImageRepository


@lru_cache
def get_image_repo() -> ImageRepository:
    # Backend is chosen once per process; the use cases only see the contract
    settings = get_settings()
    if settings.use_mongo:
        return MongoImageRepository.from_database(get_mongo_database(settings.mongo_uri, settings.mongo_db))
    settings.image_base_path.mkdir(parents=True, exist_ok=True)
    return JsonImageRepository(settings.image_base_path)


@lru_cache
def get_variation_locks() -> KeyedLock:
    return KeyedLock()


SettingsDep = Annotated[AppSettings, Depends(get_settings)]
RepoDep = Annotated[ImageRepository, Depends(get_image_repo)]


def get_upload_use_case(settings: SettingsDep, repo: RepoDep) -> UploadImageUseCase:
    return UploadImageUseCase(
        image_repo=repo,
        base_path=settings.image_base_path,
        catalog_path=settings.aspect_ratios_path,
    )


def get_original_use_case(repo: RepoDep) -> GetOriginalImageUseCase:
    return GetOriginalImageUseCase(image_repo=repo)


def get_variation_use_case(
    repo: RepoDep,
    locks: Annotated[KeyedLock, Depends(get_variation_locks)],
) -> GetImageVariationUseCase:
    return GetImageVariationUseCase(image_repo=repo, locks=locks)


def get_metadata_use_case(repo: RepoDep) -> GetImageMetadataUseCase:
    return GetImageMetadataUseCase(image_repo=repo)


def get_delete_use_case(repo: RepoDep) -> DeleteImageUseCase:
    return DeleteImageUseCase(image_repo=repo)
