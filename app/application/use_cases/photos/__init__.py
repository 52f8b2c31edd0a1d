"""Photo use cases: lifecycle coordination (write), grant-decorated queries (read), reconciliation sweep."""

from app.application.use_cases.photos.photo_operations import (
    PhotoQueryService,
    PhotoUploadCoordinator,
)
from app.application.use_cases.photos.reconcile import FindDanglingReferencesUseCase

__all__ = [
    "FindDanglingReferencesUseCase",
    "PhotoQueryService",
    "PhotoUploadCoordinator",
]
