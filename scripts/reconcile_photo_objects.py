"""Report photos whose bound object is missing from the object store.

Usage:
    uv run python -m scripts.reconcile_photo_objects [batch_size]
Read-only: lists dangling references, never deletes or rewrites anything.
Exits 2 when any dangling reference is found (useful for cron alerts).
"""

import asyncio
import sys

import app.infrastructure.persistence.database as database
from app.application.use_cases.photos import FindDanglingReferencesUseCase
from app.infrastructure.external.storage import StorageFactory
from app.infrastructure.persistence.repositories import PhotoRepository
from app.shared.telemetry import setup_logging


async def main() -> int:
    """Sweep every photo and print one line per dangling reference."""
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        return 1
    batch_size = int(sys.argv[1]) if len(sys.argv) > 1 else 500

    storage = StorageFactory.create_storage_service()
    try:
        async with database.AsyncSessionLocal() as session:
            report = await FindDanglingReferencesUseCase(
                PhotoRepository(session), storage
            ).run(batch_size=batch_size)
    finally:
        await database.dispose_engine()

    for photo_id, object_key in report.dangling:
        print(f"{photo_id}\t{object_key}")
    print(f"Done. Checked {report.checked} photo(s), {len(report.dangling)} dangling.")
    return 2 if report.dangling else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
