"""Application use cases: one entry point per workflow."""

from app.application.use_cases.photos import (
    FindDanglingReferencesUseCase,
    PhotoQueryService,
    PhotoUploadCoordinator,
)

__all__ = [
    "FindDanglingReferencesUseCase",
    "PhotoQueryService",
    "PhotoUploadCoordinator",
]
