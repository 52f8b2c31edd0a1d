"""Pytest configuration and fixtures for the photo catalog.

Environment is set before app.* imports so Settings validate without a .env:
SQLite (aiosqlite) stands in for PostgreSQL and the local backend writes
under a temporary directory. HTTP tests use app.main:app with get_db and
get_storage_service overridden to the per-test engine and storage root.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="photo-catalog-tests-"))

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.v1.dependencies import get_storage_service  # noqa: E402
from app.core.limiter import limiter  # noqa: E402
from app.infrastructure.external.storage.local_storage import (  # noqa: E402
    LocalStorageService,
)
from app.infrastructure.persistence import models  # noqa: E402,F401
from app.infrastructure.persistence.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402

limiter.enabled = False


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with the catalog schema (one connection shared by all sessions)."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's AsyncSessionLocal."""
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Database session for repository/integration tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def local_storage(tmp_path) -> LocalStorageService:
    """Local object store rooted in a per-test directory."""
    return LocalStorageService(storage_root=str(tmp_path / "objects"))


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    local_storage: LocalStorageService,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI) with test DB and storage."""

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage_service] = lambda: local_storage
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def pg_session() -> AsyncIterator[AsyncSession]:
    """Session on a real PostgreSQL database; rolled back after the test.

    Set TEST_POSTGRES_URL (postgresql+asyncpg://...) with the schema applied
    (alembic upgrade head). Run without it via: pytest -m 'not requires_db'.
    """
    url = os.environ.get("TEST_POSTGRES_URL")
    if not url:
        pytest.skip("TEST_POSTGRES_URL not set")
    eng = create_async_engine(url)
    async with eng.connect() as conn:
        trans = await conn.begin()
        async with AsyncSession(bind=conn, expire_on_commit=False) as session:
            yield session
        await trans.rollback()
    await eng.dispose()
