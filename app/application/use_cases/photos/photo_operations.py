"""Photo operations: lifecycle coordination (write) and grant-decorated queries (read).

The object store and the metadata store share no transaction. Writes are
sequenced so a failure either aborts before anything visible changed
(ValidationException / StoreUnavailableException) or is reported as
ConflictOnCleanupException naming the inconsistency left behind.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from app.application.dtos.photo import (
    PhotoCreate,
    PhotoFilter,
    PhotoPage,
    PhotoResult,
    PhotoUpdate,
    PhotoWithUrl,
)
from app.application.interfaces.repositories import IPhotoRepository
from app.application.interfaces.storage import IStorageService
from app.application.services.grant_issuer import GrantIssuer
from app.application.services.object_key_scheme import ObjectKeyScheme
from app.domain.entities.photo import PhotoEntity
from app.domain.enums import Inconsistency
from app.domain.exceptions import (
    ConflictOnCleanupException,
    ResourceNotFoundException,
    StoreUnavailableException,
    ValidationException,
)
from app.domain.value_objects.core import TagSet
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Programming errors are never translated into store errors.
_PROGRAMMING_ERRORS = (AssertionError, AttributeError, NameError, TypeError)
# Outcomes the use cases raise themselves pass through store_errors unchanged.
_CATALOG_OUTCOMES = (
    ValidationException,
    ResourceNotFoundException,
    StoreUnavailableException,
    ConflictOnCleanupException,
)


@contextmanager
def store_errors(store: str, operation: str, **details: str) -> Iterator[None]:
    """Translate unexpected store failures into StoreUnavailableException."""
    try:
        yield
    except (*_CATALOG_OUTCOMES, *_PROGRAMMING_ERRORS):
        raise
    except Exception as e:
        logger.error("%s failed during %s: %s", store, operation, e)
        raise StoreUnavailableException(store, operation, str(e), **details) from e


async def _run_to_completion(aw: Awaitable[T], what: str) -> T:
    """Await a cross-store sequence, finishing it even if the caller is cancelled.

    Once the first store has been changed the second must be written too, so
    cancellation (request timeout, client disconnect) is deferred until the
    sequence ends and re-raised afterwards.
    """
    task = asyncio.ensure_future(aw)
    cancelled = False
    while not task.done():
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise
            if not cancelled:
                logger.warning("Cancellation deferred until %s completes", what)
            cancelled = True
    if cancelled:
        raise asyncio.CancelledError()
    return task.result()


def _clean_optional(value: str | None) -> str | None:
    """Empty or whitespace-only optional text means 'no value'."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_tags(raw: Iterable[str] | str | None) -> frozenset[str]:
    """Trim tags, drop empty entries and collapse duplicates."""
    try:
        return TagSet.parse(raw).values
    except ValueError as e:
        raise ValidationException(str(e), field="tags") from e


class PhotoUploadCoordinator:
    """Create / update / delete / like, sequencing object-store and metadata-store steps.

    Creation trusts the two-step upload protocol: the caller claims the object
    for object_key was already PUT via an upload grant. Set verify_uploads to
    check existence before committing.
    """

    def __init__(
        self,
        storage_service: IStorageService,
        photo_repo: IPhotoRepository,
        key_scheme: ObjectKeyScheme,
        *,
        verify_uploads: bool = False,
    ) -> None:
        self.storage = storage_service
        self.photo_repo = photo_repo
        self.key_scheme = key_scheme
        self.verify_uploads = verify_uploads

    async def _check_object_key_available(
        self, object_key: str, photo_id: str | None = None
    ) -> None:
        if not self.key_scheme.owns(object_key):
            raise ValidationException(
                f"Object key must be under '{self.key_scheme.prefix}/'",
                field="object_key",
            )
        with store_errors("metadata_store", "get_by_object_key"):
            owner = await self.photo_repo.get_by_object_key(object_key)
        if owner is not None and owner.id != photo_id:
            raise ValidationException(
                "Object key is already bound to another photo", field="object_key"
            )
        if self.verify_uploads:
            with store_errors("object_store", "exists", object_key=object_key):
                stored = await self.storage.exists(object_key)
            if not stored:
                raise ValidationException(
                    "No uploaded object found for object key", field="object_key"
                )

    async def _rollback_quietly(self) -> None:
        try:
            await self.photo_repo.rollback()
        except Exception:
            logger.exception("Rollback failed after metadata store error")

    async def create(
        self,
        *,
        title: str,
        description: str,
        object_key: str,
        tags: Iterable[str] | str | None = None,
        location: str | None = None,
        camera: str | None = None,
    ) -> PhotoResult:
        """Commit a photo bound to an already-uploaded object_key."""
        entity = PhotoEntity(
            title=(title or "").strip(),
            description=(description or "").strip(),
            object_key=(object_key or "").strip(),
            tags=_clean_tags(tags),
            location=_clean_optional(location),
            camera=_clean_optional(camera),
        )
        await self._check_object_key_available(entity.object_key)
        data = PhotoCreate(
            id=generate_cuid(),
            title=entity.title,
            description=entity.description,
            object_key=entity.object_key,
            tags=entity.tags,
            location=entity.location,
            camera=entity.camera,
        )
        try:
            with store_errors("metadata_store", "create_photo", object_key=data.object_key):
                created = await self.photo_repo.create_photo(data)
                await self.photo_repo.commit()
        except StoreUnavailableException:
            await self._rollback_quietly()
            raise
        logger.info("Created photo %s bound to %s", created.id, created.object_key)
        return created

    async def update(self, photo_id: str, changes: PhotoUpdate) -> PhotoResult:
        """Apply a partial update; a new object_key replaces the bound object.

        Replacement order: delete old object, then commit the new key. If the
        old-object delete fails (including not found), nothing is changed.
        """
        with store_errors("metadata_store", "get_photo"):
            current = await self.photo_repo.get_by_id(photo_id)
        if current is None:
            raise ResourceNotFoundException("photo", photo_id)

        supplied = changes.supplied()
        for name in ("title", "description"):
            if name in supplied:
                supplied[name] = (supplied[name] or "").strip()
        for name in ("location", "camera"):
            if name in supplied:
                supplied[name] = _clean_optional(supplied[name])
        if "tags" in supplied:
            supplied["tags"] = _clean_tags(supplied["tags"])
        if "object_key" in supplied:
            supplied["object_key"] = (supplied["object_key"] or "").strip()
        changes = PhotoUpdate(**supplied)

        PhotoEntity(
            title=supplied.get("title", current.title),
            description=supplied.get("description", current.description),
            object_key=supplied.get("object_key", current.object_key),
            tags=frozenset(supplied.get("tags", current.tags)),
            location=supplied.get("location", current.location),
            camera=supplied.get("camera", current.camera),
        )

        new_key = supplied.get("object_key")
        if new_key is None or new_key == current.object_key:
            return await self._commit_update(photo_id, changes.without_object_key())

        await self._check_object_key_available(new_key, photo_id)
        return await _run_to_completion(
            self._replace_object(photo_id, current.object_key, new_key, changes),
            f"replace of photo {photo_id}",
        )

    async def _replace_object(
        self, photo_id: str, old_key: str, new_key: str, changes: PhotoUpdate
    ) -> PhotoResult:
        """Delete the old object, then commit the row with the new key."""
        with store_errors("object_store", "delete_object", object_key=old_key):
            deleted = await self.storage.delete(old_key)
        if not deleted:
            logger.warning(
                "Update of photo %s aborted: old object %s not found", photo_id, old_key
            )
            raise StoreUnavailableException(
                "object_store", "delete_object", "object_not_found", object_key=old_key
            )
        logger.info("Deleted old object %s for photo %s", old_key, photo_id)

        try:
            updated = await self.photo_repo.update_photo(photo_id, changes)
            if updated is not None:
                await self.photo_repo.commit()
        except _PROGRAMMING_ERRORS:
            raise
        except Exception as e:
            await self._rollback_quietly()
            logger.error(
                "Photo %s still references deleted object %s: %s", photo_id, old_key, e
            )
            raise ConflictOnCleanupException(
                photo_id, old_key, Inconsistency.DANGLING_REFERENCE.value, str(e)
            ) from e
        if updated is None:
            await self._rollback_quietly()
            # Deleted concurrently: nothing references the replacement object now.
            logger.error(
                "Photo %s vanished during replace; object %s is orphaned", photo_id, new_key
            )
            raise ConflictOnCleanupException(
                photo_id, new_key, Inconsistency.ORPHANED_OBJECT.value, "photo deleted concurrently"
            )
        logger.info("Photo %s now bound to %s", photo_id, new_key)
        return updated

    async def _commit_update(self, photo_id: str, changes: PhotoUpdate) -> PhotoResult:
        try:
            with store_errors("metadata_store", "update_photo"):
                updated = await self.photo_repo.update_photo(photo_id, changes)
                if updated is not None:
                    await self.photo_repo.commit()
        except StoreUnavailableException:
            await self._rollback_quietly()
            raise
        if updated is None:
            raise ResourceNotFoundException("photo", photo_id)
        return updated

    async def delete(self, photo_id: str) -> None:
        """Delete the bound object, then the record.

        Object delete failure aborts with the record preserved. Raises
        ResourceNotFoundException when the record is already gone.
        """
        with store_errors("metadata_store", "get_photo"):
            current = await self.photo_repo.get_by_id(photo_id)
        if current is None:
            raise ResourceNotFoundException("photo", photo_id)
        await _run_to_completion(
            self._delete_object_and_record(photo_id, current.object_key),
            f"delete of photo {photo_id}",
        )

    async def _delete_object_and_record(self, photo_id: str, object_key: str) -> None:
        with store_errors("object_store", "delete_object", object_key=object_key):
            deleted = await self.storage.delete(object_key)
        if not deleted:
            logger.warning(
                "Object %s for photo %s was already missing; removing record",
                object_key,
                photo_id,
            )

        try:
            removed = await self.photo_repo.delete_photo(photo_id)
            if removed:
                await self.photo_repo.commit()
        except _PROGRAMMING_ERRORS:
            raise
        except Exception as e:
            await self._rollback_quietly()
            logger.error(
                "Photo %s still references deleted object %s: %s", photo_id, object_key, e
            )
            raise ConflictOnCleanupException(
                photo_id, object_key, Inconsistency.DANGLING_REFERENCE.value, str(e)
            ) from e
        if not removed:
            raise ResourceNotFoundException("photo", photo_id)
        logger.info("Deleted photo %s and object %s", photo_id, object_key)

    async def like(self, photo_id: str) -> PhotoResult:
        """Add one like with an atomic increment in the metadata store."""
        try:
            with store_errors("metadata_store", "increment_likes"):
                liked = await self.photo_repo.increment_likes(photo_id)
                if liked is not None:
                    await self.photo_repo.commit()
        except StoreUnavailableException:
            await self._rollback_quietly()
            raise
        if liked is None:
            raise ResourceNotFoundException("photo", photo_id)
        return liked


class PhotoQueryService:
    """Read path: catalog rows decorated with freshly issued download grants.

    Grants are issued per call and never persisted. One failed grant fails the
    whole response.
    """

    def __init__(
        self,
        photo_repo: IPhotoRepository,
        grant_issuer: GrantIssuer,
        *,
        default_page_size: int = 12,
        max_page_size: int = 100,
    ) -> None:
        self.photo_repo = photo_repo
        self.grant_issuer = grant_issuer
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def with_download_url(self, photo: PhotoResult) -> PhotoWithUrl:
        """Attach a download grant to one photo."""
        grant = await self.grant_issuer.issue_download_grant(photo.object_key)
        return PhotoWithUrl(photo=photo, download=grant)

    async def after_write(self, photo: PhotoResult) -> PhotoWithUrl:
        """Attach a download grant to a just-committed photo, if one can be minted.

        The write already took effect, so a grant failure is logged and the
        photo is returned without a URL instead of failing the request.
        """
        try:
            return await self.with_download_url(photo)
        except StoreUnavailableException as e:
            logger.warning(
                "Photo %s saved but no download URL issued: %s", photo.id, e.message
            )
            return PhotoWithUrl(photo=photo, download=None)

    async def _with_download_urls(self, photos: list[PhotoResult]) -> list[PhotoWithUrl]:
        return list(await asyncio.gather(*(self.with_download_url(p) for p in photos)))

    async def list_photos(
        self,
        page: int = 1,
        page_size: int | None = None,
        search: str | None = None,
        tag: str | None = None,
    ) -> PhotoPage:
        """Return one page of photos (newest first) matching search AND tag."""
        if page < 1:
            raise ValidationException("Page must be >= 1", field="page")
        size = page_size if page_size is not None else self.default_page_size
        if size < 1 or size > self.max_page_size:
            raise ValidationException(
                f"Page size must be between 1 and {self.max_page_size}",
                field="page_size",
            )
        photo_filter = PhotoFilter(
            search=(search or "").strip() or None,
            tag=(tag or "").strip() or None,
        )
        with store_errors("metadata_store", "find"):
            rows, total = await self.photo_repo.find(photo_filter, page, size)
        return PhotoPage(
            rows=await self._with_download_urls(rows),
            page=page,
            page_size=size,
            total_pages=math.ceil(total / size),
            total_count=total,
        )

    async def get_photo(self, photo_id: str) -> PhotoWithUrl:
        """Return one photo with a download grant; ResourceNotFoundException if missing."""
        with store_errors("metadata_store", "get_photo"):
            photo = await self.photo_repo.get_by_id(photo_id)
        if photo is None:
            raise ResourceNotFoundException("photo", photo_id)
        return await self.with_download_url(photo)

    async def list_tags(self) -> list[str]:
        """Return every tag in use, sorted and de-duplicated."""
        with store_errors("metadata_store", "list_distinct_tags"):
            return await self.photo_repo.list_distinct_tags()
