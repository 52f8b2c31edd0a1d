"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging, DB engine
dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging. Shutdown: SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    logger.info(
        "%s %s starting (storage backend: %s, key prefix: %s)",
        settings.app_name,
        settings.app_version,
        settings.storage_backend,
        settings.object_key_prefix,
    )
    if settings.verify_uploaded_objects:
        logger.info("Uploaded objects are verified before photo records are committed")

    yield

    # ---- Shutdown ----
    await dispose_engine()
