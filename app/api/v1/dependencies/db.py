"""DB and store dependencies (composition root)."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.storage import IStorageService
from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import PhotoRepository


@lru_cache
def get_storage_service() -> IStorageService:
    """Object store for the configured backend (local or s3), one per process.

    Cached so the local backend's grant tokens outlive the request that
    issued them.
    """
    return StorageFactory.create_storage_service()


async def get_photo_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PhotoRepository:
    """Photo repository bound to the request's session."""
    return PhotoRepository(db)
