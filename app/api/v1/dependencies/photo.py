"""Photo use-case dependencies (composition root)."""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends

from app.application.interfaces.storage import IStorageService
from app.application.services.grant_issuer import GrantIssuer
from app.application.services.object_key_scheme import ObjectKeyScheme
from app.application.use_cases.photos import (
    PhotoQueryService,
    PhotoUploadCoordinator,
)
from app.core.config import get_settings
from app.infrastructure.persistence.repositories import PhotoRepository
from . import db as db_deps


def get_object_key_scheme() -> ObjectKeyScheme:
    """Key scheme for the configured prefix."""
    return ObjectKeyScheme(get_settings().object_key_prefix)


def get_grant_issuer(
    storage: Annotated[IStorageService, Depends(db_deps.get_storage_service)],
    key_scheme: Annotated[ObjectKeyScheme, Depends(get_object_key_scheme)],
) -> GrantIssuer:
    """Grant issuer with TTLs and allowed content types from settings."""
    settings = get_settings()
    return GrantIssuer(
        storage,
        key_scheme,
        upload_ttl=timedelta(seconds=settings.upload_grant_ttl_seconds),
        download_ttl=timedelta(seconds=settings.download_grant_ttl_seconds),
        allowed_content_types=settings.upload_content_type_patterns,
    )


async def get_photo_coordinator(
    storage: Annotated[IStorageService, Depends(db_deps.get_storage_service)],
    photo_repo: Annotated[PhotoRepository, Depends(db_deps.get_photo_repo)],
    key_scheme: Annotated[ObjectKeyScheme, Depends(get_object_key_scheme)],
) -> PhotoUploadCoordinator:
    """Build PhotoUploadCoordinator for create / update / delete / like."""
    return PhotoUploadCoordinator(
        storage_service=storage,
        photo_repo=photo_repo,
        key_scheme=key_scheme,
        verify_uploads=get_settings().verify_uploaded_objects,
    )


async def get_photo_query_service(
    photo_repo: Annotated[PhotoRepository, Depends(db_deps.get_photo_repo)],
    grant_issuer: Annotated[GrantIssuer, Depends(get_grant_issuer)],
) -> PhotoQueryService:
    """Build PhotoQueryService for listing, detail and tags (rows carry download URLs)."""
    settings = get_settings()
    return PhotoQueryService(
        photo_repo=photo_repo,
        grant_issuer=grant_issuer,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
