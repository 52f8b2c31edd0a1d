"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (photo repository, object storage).
"""

from app.application.interfaces import IPhotoRepository, IStorageService
from app.application.services import GrantIssuer, ObjectKeyScheme
from app.application.use_cases import (
    FindDanglingReferencesUseCase,
    PhotoQueryService,
    PhotoUploadCoordinator,
)

__all__ = [
    "FindDanglingReferencesUseCase",
    "GrantIssuer",
    "IPhotoRepository",
    "IStorageService",
    "ObjectKeyScheme",
    "PhotoQueryService",
    "PhotoUploadCoordinator",
]
