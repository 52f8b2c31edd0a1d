"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.photo_repo import PhotoRepository

__all__ = [
    "BaseRepository",
    "PhotoRepository",
]
