"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.photo import (
    PhotoCreateRequest,
    PhotoDeleteResponse,
    PhotoListResponse,
    PhotoResponse,
    PhotoUpdateRequest,
    UploadTargetRequest,
    UploadTargetResponse,
)

__all__ = [
    "HealthResponse",
    "PhotoCreateRequest",
    "PhotoDeleteResponse",
    "PhotoListResponse",
    "PhotoResponse",
    "PhotoUpdateRequest",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "UploadTargetRequest",
    "UploadTargetResponse",
]
