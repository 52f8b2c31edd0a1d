"""Object store protocol (DIP). Implementations: LocalStorageService, S3StorageService."""

from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Any, BinaryIO, Protocol


class IStorageService(Protocol):
    """Protocol for object storage backends (local, S3-compatible).

    generate_upload_url / generate_download_url mint scoped, time-limited
    grants without performing the transfer or touching the object.
    """

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes under storage_ref (server-side put)."""
        ...

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream object content."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        """Return True if object exists."""
        ...

    async def generate_upload_url(
        self,
        storage_ref: str,
        content_type: str,
        expiration: timedelta = timedelta(minutes=5),
    ) -> str:
        """Return a URL that authorizes one PUT of storage_ref with content_type."""
        ...

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
    ) -> str:
        """Return a URL that authorizes GET of storage_ref (presigned for S3, token URL for local)."""
        ...
