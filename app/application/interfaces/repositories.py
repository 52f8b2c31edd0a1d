"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.photo import (
        PhotoCreate,
        PhotoFilter,
        PhotoResult,
        PhotoUpdate,
    )


class IPhotoRepository(Protocol):
    """Protocol for the photo metadata catalog (DIP)."""

    async def find(
        self, photo_filter: PhotoFilter, page: int, page_size: int
    ) -> tuple[list[PhotoResult], int]:
        """Return (rows for the 1-indexed page, total match count), newest first."""

    async def get_by_id(self, photo_id: str) -> PhotoResult | None:
        """Return photo by ID."""

    async def get_by_object_key(self, object_key: str) -> PhotoResult | None:
        """Return the photo bound to object_key, if any."""

    async def create_photo(self, data: PhotoCreate) -> PhotoResult:
        """Insert a photo row (likes=0) with its tags."""

    async def update_photo(
        self, photo_id: str, changes: PhotoUpdate
    ) -> PhotoResult | None:
        """Overwrite only supplied fields; return None if the photo does not exist."""

    async def delete_photo(self, photo_id: str) -> bool:
        """Delete the photo row and its tags. Returns False if it did not exist."""

    async def increment_likes(self, photo_id: str) -> PhotoResult | None:
        """Atomically add one like; return None if the photo does not exist."""

    async def list_distinct_tags(self) -> list[str]:
        """Return every tag in use, de-duplicated and sorted."""

    def iter_object_keys(
        self, batch_size: int = 500
    ) -> AsyncIterator[list[tuple[str, str]]]:
        """Yield batches of (photo_id, object_key), oldest first."""

    async def commit(self) -> None:
        """Durably commit pending changes (raises on failure)."""

    async def rollback(self) -> None:
        """Discard pending changes."""
