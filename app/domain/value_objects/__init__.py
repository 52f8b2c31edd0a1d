"""Domain value objects (immutable, self-validating)."""

from app.domain.value_objects.core import FileExtension, TagSet

__all__ = [
    "FileExtension",
    "TagSet",
]
