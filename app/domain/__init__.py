"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import PhotoEntity
from app.domain.enums import GrantMethod, Inconsistency
from app.domain.exceptions import (
    ConflictOnCleanupException,
    PhotoCatalogException,
    ResourceNotFoundException,
    StoreUnavailableException,
    ValidationException,
)
from app.domain.value_objects import FileExtension, TagSet

__all__ = [
    "ConflictOnCleanupException",
    "FileExtension",
    "GrantMethod",
    "Inconsistency",
    "PhotoCatalogException",
    "PhotoEntity",
    "ResourceNotFoundException",
    "StoreUnavailableException",
    "TagSet",
    "ValidationException",
]
