"""Photo repository (metadata catalog). Returns application DTOs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.photo import (
    PhotoCreate,
    PhotoFilter,
    PhotoResult,
    PhotoUpdate,
)
from app.infrastructure.persistence.models.photo import Photo, PhotoTag
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now

_LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so search is a plain substring match."""
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


def _photo_to_result(p: Photo, tags: Iterable[str]) -> PhotoResult:
    """Map ORM Photo plus its tag rows to application PhotoResult."""
    return PhotoResult(
        id=p.id,
        title=p.title,
        description=p.description,
        object_key=p.object_key,
        tags=sorted(tags),
        location=p.location,
        camera=p.camera,
        likes=p.likes,
        created_at=ensure_utc(p.created_at),
        updated_at=ensure_utc(p.updated_at),
    )


class PhotoRepository(BaseRepository[Photo]):
    """Photo repository. create_photo() accepts PhotoCreate (write-model); returns PhotoResult (read-model).

    Tags live in photo_tag rows and are read in one batched query per result set.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Photo)

    async def _tags_by_photo(self, photo_ids: Sequence[str]) -> dict[str, list[str]]:
        if not photo_ids:
            return {}
        result = await self.db.execute(
            select(PhotoTag.photo_id, PhotoTag.tag).where(
                PhotoTag.photo_id.in_(photo_ids)
            )
        )
        tags: defaultdict[str, list[str]] = defaultdict(list)
        for photo_id, tag in result.all():
            tags[photo_id].append(tag)
        return tags

    async def _to_results(self, rows: Sequence[Photo]) -> list[PhotoResult]:
        tags = await self._tags_by_photo([p.id for p in rows])
        return [_photo_to_result(p, tags.get(p.id, [])) for p in rows]

    async def _to_result(self, row: Photo) -> PhotoResult:
        return (await self._to_results([row]))[0]

    async def _replace_tags(self, photo_id: str, tags: Iterable[str]) -> None:
        await self.db.execute(delete(PhotoTag).where(PhotoTag.photo_id == photo_id))
        self.db.add_all(PhotoTag(photo_id=photo_id, tag=t) for t in sorted(set(tags)))
        await self.db.flush()

    async def _on_before_delete(self, obj: Photo) -> None:
        await self.db.execute(delete(PhotoTag).where(PhotoTag.photo_id == obj.id))

    @staticmethod
    def _filter_conditions(photo_filter: PhotoFilter) -> list[Any]:
        conditions: list[Any] = []
        if photo_filter.search:
            pattern = f"%{_escape_like(photo_filter.search)}%"
            conditions.append(
                or_(
                    Photo.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    Photo.description.ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
        if photo_filter.tag:
            conditions.append(
                select(PhotoTag.photo_id)
                .where(PhotoTag.photo_id == Photo.id, PhotoTag.tag == photo_filter.tag)
                .exists()
            )
        return conditions

    async def find(
        self, photo_filter: PhotoFilter, page: int, page_size: int
    ) -> tuple[list[PhotoResult], int]:
        """Return (rows for the 1-indexed page, total match count), newest first."""
        conditions = self._filter_conditions(photo_filter)
        total = (
            await self.db.execute(
                select(func.count()).select_from(Photo).where(*conditions)
            )
        ).scalar_one()
        if total == 0:
            return [], 0
        result = await self.db.execute(
            select(Photo)
            .where(*conditions)
            .order_by(Photo.created_at.desc(), Photo.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return await self._to_results(result.scalars().all()), total

    async def get_by_id(self, photo_id: str) -> PhotoResult | None:
        row = await self.get_orm_by_id(photo_id)
        return await self._to_result(row) if row else None

    async def get_by_object_key(self, object_key: str) -> PhotoResult | None:
        """Return the photo bound to object_key (unique), or None."""
        result = await self.db.execute(
            select(Photo).where(Photo.object_key == object_key)
        )
        row = result.scalar_one_or_none()
        return await self._to_result(row) if row else None

    async def create_photo(self, data: PhotoCreate) -> PhotoResult:
        """Create photo and its tags from write-model DTO; return read-model."""
        orm = Photo(
            id=data.id,
            title=data.title,
            description=data.description,
            object_key=data.object_key,
            location=data.location,
            camera=data.camera,
            likes=0,
        )
        created = await super().create(orm)
        await self._replace_tags(created.id, data.tags)
        return _photo_to_result(created, data.tags)

    async def update_photo(
        self, photo_id: str, changes: PhotoUpdate
    ) -> PhotoResult | None:
        """Overwrite only the supplied fields (partial update)."""
        orm = await self.get_orm_by_id(photo_id)
        if orm is None:
            return None
        supplied = changes.supplied()
        tags = supplied.pop("tags", None)
        for name, value in supplied.items():
            setattr(orm, name, value)
        if tags is not None:
            await self._replace_tags(photo_id, tags)
        if supplied or tags is not None:
            orm.updated_at = utc_now()
        updated = await super().update(orm)
        return await self._to_result(updated)

    async def delete_photo(self, photo_id: str) -> bool:
        """Delete photo and tag rows. Returns False if the photo did not exist."""
        orm = await self.get_orm_by_id(photo_id)
        if orm is None:
            return False
        await super().delete(orm)
        return True

    async def increment_likes(self, photo_id: str) -> PhotoResult | None:
        """likes = likes + 1 in a single UPDATE (no read-modify-write)."""
        result = await self.db.execute(
            update(Photo)
            .where(Photo.id == photo_id)
            .values(likes=Photo.likes + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        row = (
            await self.db.execute(
                select(Photo)
                .where(Photo.id == photo_id)
                .execution_options(populate_existing=True)
            )
        ).scalar_one()
        return await self._to_result(row)

    async def list_distinct_tags(self) -> list[str]:
        """Return every tag in use, de-duplicated and sorted by code point."""
        result = await self.db.execute(select(PhotoTag.tag).distinct())
        return sorted(result.scalars().all())

    async def iter_object_keys(
        self, batch_size: int = 500
    ) -> AsyncIterator[list[tuple[str, str]]]:
        """Yield (photo_id, object_key) batches using keyset pagination on id."""
        last_id: str | None = None
        while True:
            stmt = select(Photo.id, Photo.object_key).order_by(Photo.id).limit(batch_size)
            if last_id is not None:
                stmt = stmt.where(Photo.id > last_id)
            rows = [(r.id, r.object_key) for r in (await self.db.execute(stmt)).all()]
            if not rows:
                return
            yield rows
            if len(rows) < batch_size:
                return
            last_id = rows[-1][0]
