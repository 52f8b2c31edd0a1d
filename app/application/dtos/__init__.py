"""Application DTOs (no ORM dependency)."""

from app.application.dtos.photo import (
    UNSET,
    Grant,
    PhotoCreate,
    PhotoFilter,
    PhotoPage,
    PhotoResult,
    PhotoUpdate,
    PhotoWithUrl,
    ReconciliationReport,
    UploadTarget,
)

__all__ = [
    "UNSET",
    "Grant",
    "PhotoCreate",
    "PhotoFilter",
    "PhotoPage",
    "PhotoResult",
    "PhotoUpdate",
    "PhotoWithUrl",
    "ReconciliationReport",
    "UploadTarget",
]
