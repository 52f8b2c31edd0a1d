"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, stores and photo use cases.
Routes depend only on these dependencies, never construct repos or
storage services directly. Tests swap them via app.dependency_overrides.
"""

from app.api.v1.dependencies.db import get_photo_repo, get_storage_service
from app.api.v1.dependencies.photo import (
    get_grant_issuer,
    get_object_key_scheme,
    get_photo_coordinator,
    get_photo_query_service,
)

__all__ = [
    "get_grant_issuer",
    "get_object_key_scheme",
    "get_photo_coordinator",
    "get_photo_query_service",
    "get_photo_repo",
    "get_storage_service",
]
