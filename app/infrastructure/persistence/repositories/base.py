"""Base repository: generic CRUD, explicit commit/rollback, and a pre-delete hook."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_orm_by_id, create, update and delete.

    Mutations only flush; callers decide when the unit of work is durable via
    commit(). Subclasses override _on_before_delete for child-row maintenance.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_orm_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and refresh server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Run _on_before_delete hook then delete the record."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def commit(self) -> None:
        """Commit the session's transaction."""
        await self.db.commit()

    async def rollback(self) -> None:
        """Roll back the session's transaction."""
        await self.db.rollback()

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Override in subclasses to remove dependent rows or emit events."""
