"""Find dangling references: photos whose bound object is missing from the store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.application.dtos.photo import ReconciliationReport
from app.application.use_cases.photos.photo_operations import store_errors

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IPhotoRepository
    from app.application.interfaces.storage import IStorageService

logger = logging.getLogger(__name__)

RECONCILE_BATCH_SIZE = 500


class FindDanglingReferencesUseCase:
    """Read-only sweep over every photo's object key.

    Reports records whose object does not exist (e.g. the client never completed
    its upload, or a crash interrupted a replace). Nothing is deleted or rewritten;
    operators decide how to resolve each entry.
    """

    def __init__(
        self,
        photo_repo: "IPhotoRepository",
        storage_service: "IStorageService",
    ) -> None:
        self._photo_repo = photo_repo
        self._storage = storage_service

    async def run(self, batch_size: int = RECONCILE_BATCH_SIZE) -> ReconciliationReport:
        """Check each photo's object; return the count checked and the dangling pairs."""
        checked = 0
        dangling: list[tuple[str, str]] = []
        with store_errors("metadata_store", "iter_object_keys"):
            async for batch in self._photo_repo.iter_object_keys(batch_size):
                for photo_id, object_key in batch:
                    with store_errors("object_store", "exists", object_key=object_key):
                        found = await self._storage.exists(object_key)
                    checked += 1
                    if not found:
                        logger.warning(
                            "Dangling reference: photo %s -> %s", photo_id, object_key
                        )
                        dangling.append((photo_id, object_key))
        return ReconciliationReport(checked=checked, dangling=dangling)
