"""In-memory stand-ins for the photo repository and the object store.

Each fake records the calls it received (calls) so tests can assert ordering
across both stores, and raises an injected error for any method listed in
fail_on.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, BinaryIO

from app.application.dtos.photo import (
    PhotoCreate,
    PhotoFilter,
    PhotoResult,
    PhotoUpdate,
)

_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


class CallLog(list):
    """Shared, ordered log of (store, method, arg) tuples."""


class FakePhotoRepository:
    """Dict-backed IPhotoRepository; writes are staged until commit()."""

    def __init__(self, log: CallLog | None = None) -> None:
        self.rows: dict[str, PhotoResult] = {}
        self._staged: dict[str, PhotoResult | None] = {}
        self.calls = log if log is not None else CallLog()
        self.fail_on: dict[str, Exception] = {}
        self.commits = 0
        self.rollbacks = 0
        self._clock = 0

    def _record(self, method: str, arg: Any = None) -> None:
        self.calls.append(("metadata_store", method, arg))
        if method in self.fail_on:
            raise self.fail_on[method]

    def _view(self) -> dict[str, PhotoResult]:
        merged = dict(self.rows)
        for k, v in self._staged.items():
            if v is None:
                merged.pop(k, None)
            else:
                merged[k] = v
        return merged

    def _tick(self) -> datetime:
        self._clock += 1
        return _EPOCH + timedelta(seconds=self._clock)

    def add(self, **overrides: Any) -> PhotoResult:
        """Seed a committed row (test setup helper)."""
        now = self._tick()
        photo = PhotoResult(
            id=overrides.pop("id", f"p{self._clock}"),
            title=overrides.pop("title", "Sunset"),
            description=overrides.pop("description", "Over the bay"),
            object_key=overrides.pop("object_key", f"photos/seed-{self._clock}.jpg"),
            tags=sorted(overrides.pop("tags", [])),
            location=overrides.pop("location", None),
            camera=overrides.pop("camera", None),
            likes=overrides.pop("likes", 0),
            created_at=now,
            updated_at=now,
        )
        assert not overrides, overrides
        self.rows[photo.id] = photo
        return photo

    async def find(
        self, photo_filter: PhotoFilter, page: int, page_size: int
    ) -> tuple[list[PhotoResult], int]:
        self._record("find", photo_filter)
        rows = list(self._view().values())
        if photo_filter.search:
            needle = photo_filter.search.lower()
            rows = [
                r for r in rows
                if needle in r.title.lower() or needle in r.description.lower()
            ]
        if photo_filter.tag:
            rows = [r for r in rows if photo_filter.tag in r.tags]
        rows.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        start = (page - 1) * page_size
        return rows[start : start + page_size], len(rows)

    async def get_by_id(self, photo_id: str) -> PhotoResult | None:
        self._record("get_by_id", photo_id)
        return self._view().get(photo_id)

    async def get_by_object_key(self, object_key: str) -> PhotoResult | None:
        self._record("get_by_object_key", object_key)
        return next(
            (r for r in self._view().values() if r.object_key == object_key), None
        )

    async def create_photo(self, data: PhotoCreate) -> PhotoResult:
        self._record("create_photo", data.object_key)
        now = self._tick()
        photo = PhotoResult(
            id=data.id,
            title=data.title,
            description=data.description,
            object_key=data.object_key,
            tags=sorted(data.tags),
            location=data.location,
            camera=data.camera,
            likes=0,
            created_at=now,
            updated_at=now,
        )
        self._staged[photo.id] = photo
        return photo

    async def update_photo(
        self, photo_id: str, changes: PhotoUpdate
    ) -> PhotoResult | None:
        self._record("update_photo", photo_id)
        current = self._view().get(photo_id)
        if current is None:
            return None
        values = changes.supplied()
        if "tags" in values:
            values["tags"] = sorted(values["tags"])
        updated = replace(current, **values, updated_at=self._tick())
        self._staged[photo_id] = updated
        return updated

    async def delete_photo(self, photo_id: str) -> bool:
        self._record("delete_photo", photo_id)
        if photo_id not in self._view():
            return False
        self._staged[photo_id] = None
        return True

    async def increment_likes(self, photo_id: str) -> PhotoResult | None:
        self._record("increment_likes", photo_id)
        current = self.rows.get(photo_id)
        if current is None:
            return None
        # Yield mid-operation: a read-modify-write caller would lose updates here.
        await asyncio.sleep(0)
        liked = replace(self.rows[photo_id], likes=self.rows[photo_id].likes + 1)
        self.rows[photo_id] = liked
        return liked

    async def list_distinct_tags(self) -> list[str]:
        self._record("list_distinct_tags")
        return sorted({t for r in self._view().values() for t in r.tags})

    async def iter_object_keys(
        self, batch_size: int = 500
    ) -> AsyncIterator[list[tuple[str, str]]]:
        self._record("iter_object_keys", batch_size)
        pairs = sorted((r.id, r.object_key) for r in self._view().values())
        for i in range(0, len(pairs), batch_size):
            yield pairs[i : i + batch_size]

    async def commit(self) -> None:
        self._record("commit")
        for k, v in self._staged.items():
            if v is None:
                self.rows.pop(k, None)
            else:
                self.rows[k] = v
        self._staged.clear()
        self.commits += 1

    async def rollback(self) -> None:
        self.calls.append(("metadata_store", "rollback", None))
        self._staged.clear()
        self.rollbacks += 1


class FakeStorage:
    """Dict-backed IStorageService. URLs are fake://<method>/<key>."""

    def __init__(self, log: CallLog | None = None) -> None:
        self.objects: dict[str, bytes] = {}
        self.calls = log if log is not None else CallLog()
        self.fail_on: dict[str, Exception] = {}
        # Seconds to stall after an object is removed, before delete returns.
        self.delete_delay = 0.0

    def _record(self, method: str, arg: Any = None) -> None:
        self.calls.append(("object_store", method, arg))
        if method in self.fail_on:
            raise self.fail_on[method]

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        self._record("upload", storage_ref)
        self.objects[storage_ref] = file_data.read()
        return {"storage_ref": storage_ref, "size": len(self.objects[storage_ref])}

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        self._record("download", storage_ref)
        yield self.objects[storage_ref]

    async def delete(self, storage_ref: str) -> bool:
        self._record("delete", storage_ref)
        removed = self.objects.pop(storage_ref, None) is not None
        if self.delete_delay:
            await asyncio.sleep(self.delete_delay)
        return removed

    async def exists(self, storage_ref: str) -> bool:
        self._record("exists", storage_ref)
        return storage_ref in self.objects

    async def generate_upload_url(
        self, storage_ref: str, content_type: str, expiration: timedelta = timedelta(minutes=5)
    ) -> str:
        self._record("generate_upload_url", storage_ref)
        return f"fake://PUT/{storage_ref}?ttl={int(expiration.total_seconds())}"

    async def generate_download_url(
        self, storage_ref: str, expiration: timedelta = timedelta(hours=1)
    ) -> str:
        self._record("generate_download_url", storage_ref)
        return f"fake://GET/{storage_ref}?ttl={int(expiration.total_seconds())}"
