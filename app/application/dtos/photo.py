"""DTOs for photo use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Final

from app.domain.enums import GrantMethod


class _Unset:
    """Marker type for 'field not supplied' in partial updates."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True)
class PhotoCreate:
    """Input for creating a photo record (write-model). Use case builds this; repo persists and returns PhotoResult."""

    id: str
    title: str
    description: str
    object_key: str
    tags: frozenset[str] = frozenset()
    location: str | None = None
    camera: str | None = None


@dataclass(frozen=True)
class PhotoUpdate:
    """Partial update. Each attribute is UNSET (leave unchanged) or a new value.

    None / "" for location and camera clear the field; tags=frozenset() clears all tags.
    A set object_key means "replace the bound object" (see PhotoUploadCoordinator.update).
    """

    title: str | _Unset = UNSET
    description: str | _Unset = UNSET
    tags: frozenset[str] | _Unset = UNSET
    location: str | None | _Unset = UNSET
    camera: str | None | _Unset = UNSET
    object_key: str | _Unset = UNSET

    def supplied(self) -> dict[str, Any]:
        """Return only the attributes that were explicitly supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def without_object_key(self) -> PhotoUpdate:
        """Return a copy with object_key UNSET (field-only edit)."""
        values = self.supplied()
        values.pop("object_key", None)
        return PhotoUpdate(**values)


@dataclass(frozen=True)
class PhotoResult:
    """Photo read-model (result of get_by_id, find, create, update, increment_likes)."""

    id: str
    title: str
    description: str
    object_key: str
    tags: list[str]
    location: str | None
    camera: str | None
    likes: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PhotoFilter:
    """Catalog query filter. search: case-insensitive substring of title or description; tag: exact membership."""

    search: str | None = None
    tag: str | None = None


@dataclass(frozen=True)
class Grant:
    """Time-boxed permission to perform one transfer (method) on one object key."""

    url: str
    object_key: str
    method: GrantMethod
    expires_at: datetime


@dataclass(frozen=True)
class UploadTarget:
    """Result of issue_upload_target: where to PUT the bytes and the key to report back on create/update."""

    url: str
    object_key: str
    content_type: str
    expires_at: datetime


@dataclass(frozen=True)
class PhotoWithUrl:
    """Photo plus a freshly issued download grant (never persisted).

    download is None when a write committed but the grant could not be minted.
    """

    photo: PhotoResult
    download: Grant | None


@dataclass(frozen=True)
class PhotoPage:
    """One page of catalog results, each row with a download grant."""

    rows: list[PhotoWithUrl]
    page: int
    page_size: int
    total_pages: int
    total_count: int


@dataclass(frozen=True)
class ReconciliationReport:
    """Result of the dangling-reference sweep (read-only)."""

    checked: int
    dangling: list[tuple[str, str]] = field(default_factory=list)  # (photo_id, object_key)
