"""Local filesystem storage with path validation, atomic writes, and token grants."""

from __future__ import annotations

import hashlib
import heapq
import json
import os
import secrets
import tempfile
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from threading import Lock
from typing import Any, BinaryIO

import aiofiles
import aiofiles.os

from app.domain.enums import GrantMethod
from app.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from app.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class LocalGrant:
    """In-memory grant record: one method on one storage_ref until expires_at."""

    storage_ref: str
    method: GrantMethod
    expires_at: datetime
    content_type: str | None = None


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename.
    Metadata stored in .meta.json sidecar. Grants are in-memory tokens, held per
    instance and redeemed by the /storage endpoints (upload tokens are single-use).
    """

    CHUNK_SIZE = 64 * 1024  # 64KB
    UPLOAD_PATH = "/api/v1/storage/upload"
    DOWNLOAD_PATH = "/api/v1/storage/download"

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            base_url: Base URL for grant endpoints (e.g. https://api.example.com).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)
        # Token table is per instance; the app shares one instance across requests.
        self._grants: dict[str, LocalGrant] = {}
        self._grants_lock = Lock()
        self._expiry_heap: list[tuple[datetime, str]] = []

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_suffix(file_path.suffix + ".meta.json")

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        """Write JSON sidecar."""
        meta_path = self._meta_path(file_path)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))
        os.chmod(meta_path, 0o640)

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        """Read JSON sidecar or empty dict."""
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            result = json.loads(await f.read())
            return result if isinstance(result, dict) else {}

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write file atomically (temp file + rename); overwrites an existing object."""
        try:
            target_path = self._get_full_path(storage_ref)
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            file_content = file_data.read()
            checksum = hashlib.sha256(file_content).hexdigest()

            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(file_content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
            upload_meta: dict[str, Any] = {
                "storage_ref": storage_ref,
                "checksum": checksum,
                "size": len(file_content),
                "content_type": content_type,
                "uploaded_at": utc_now().isoformat(),
                "custom": metadata or {},
            }
            await self._write_metadata(target_path, upload_meta)
            return {
                "storage_ref": storage_ref,
                "checksum": checksum,
                "size": len(file_content),
            }
        except StoragePermissionError:
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content."""
        try:
            file_path = self._get_full_path(storage_ref)
            if not file_path.exists():
                raise StorageNotFoundError(storage_ref)
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    chunk = await f.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
        except (StorageNotFoundError, StoragePermissionError):
            raise
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def content_type(self, storage_ref: str) -> str:
        """Return the stored content type (application/octet-stream if unknown)."""
        stored = await self._read_metadata(self._get_full_path(storage_ref))
        return stored.get("content_type", "application/octet-stream")

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and metadata. Returns True if deleted, False if not found."""
        try:
            file_path = self._get_full_path(storage_ref)
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
            return True
        except StoragePermissionError:
            raise
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
        return self._get_full_path(storage_ref).exists()

    def _issue_token(self, grant: LocalGrant) -> str:
        token = secrets.token_urlsafe(32)
        with self._grants_lock:
            self._cleanup_expired_tokens()
            self._grants[token] = grant
            heapq.heappush(self._expiry_heap, (grant.expires_at, token))
        return token

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}" if self.base_url else path

    async def generate_upload_url(
        self,
        storage_ref: str,
        content_type: str,
        expiration: timedelta = timedelta(minutes=5),
    ) -> str:
        """Return single-use upload URL (PUT body is stored under storage_ref)."""
        self._get_full_path(storage_ref)
        token = self._issue_token(
            LocalGrant(
                storage_ref=storage_ref,
                method=GrantMethod.PUT,
                expires_at=utc_now() + expiration,
                content_type=content_type,
            )
        )
        return self._url(f"{self.UPLOAD_PATH}/{token}")

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
    ) -> str:
        """Return temporary download URL (token-based)."""
        self._get_full_path(storage_ref)
        token = self._issue_token(
            LocalGrant(
                storage_ref=storage_ref,
                method=GrantMethod.GET,
                expires_at=utc_now() + expiration,
            )
        )
        return self._url(f"{self.DOWNLOAD_PATH}/{token}")

    def _cleanup_expired_tokens(self) -> None:
        """Evict expired tokens, soonest expiry first. Caller holds _grants_lock."""
        now = utc_now()
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            _, token = heapq.heappop(self._expiry_heap)
            self._grants.pop(token, None)

    def redeem_upload_token(self, token: str) -> LocalGrant | None:
        """Consume an upload token; return its grant if valid and not expired."""
        with self._grants_lock:
            grant = self._grants.get(token)
            if grant is None or grant.method is not GrantMethod.PUT:
                return None
            del self._grants[token]
        if utc_now() > grant.expires_at:
            return None
        return grant

    def validate_download_token(self, token: str) -> str | None:
        """Return storage_ref if the download token is valid and not expired."""
        with self._grants_lock:
            grant = self._grants.get(token)
            if grant is None or grant.method is not GrantMethod.GET:
                return None
            if utc_now() > grant.expires_at:
                del self._grants[token]
                return None
        return grant.storage_ref
