"""Photo API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from app.application.dtos.photo import PhotoUpdate, PhotoWithUrl, UploadTarget


def _split_tags(v: Any) -> Any:
    """Accept a list of tags or a comma-separated string; drop empty entries.

    Non-string entries are kept so validation rejects them.
    """
    if v is None:
        return v
    items = v.split(",") if isinstance(v, str) else v
    if not isinstance(items, list):
        return v
    return [
        t.strip() if isinstance(t, str) else t
        for t in items
        if not isinstance(t, str) or t.strip()
    ]


class PhotoCreateRequest(BaseModel):
    """Request body for POST /photos. object_key comes from POST /photos/presigned-url.

    Field rules (lengths, non-empty title and description) are enforced by the
    domain and reported as VALIDATION_ERROR (400).
    """

    title: str = ""
    description: str = ""
    object_key: str = Field(default="", description="Key returned by the upload target")
    tags: list[str] = Field(default_factory=list, description="List or comma-separated string")
    location: str | None = None
    camera: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, v: Any) -> Any:
        return _split_tags(v) if v is not None else []


class PhotoUpdateRequest(BaseModel):
    """Request body for PUT/PATCH /photos/{id} (partial).

    Omitted fields are left unchanged. location/camera null or "" clear the
    field; tags [] clears all tags; object_key replaces the bound image.
    """

    title: str | None = None
    description: str | None = None
    object_key: str | None = None
    tags: list[str] | None = None
    location: str | None = None
    camera: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, v: Any) -> Any:
        return _split_tags(v)

    def to_update(self) -> PhotoUpdate:
        """Build a presence-aware PhotoUpdate from the fields the client sent."""
        values: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "tags":
                value = frozenset(value or ())
            elif name in ("title", "description", "object_key") and value is None:
                value = ""
            values[name] = value
        return PhotoUpdate(**values)


class PhotoResponse(BaseModel):
    """Photo with a freshly issued download URL (image_url is never stored).

    After a write, image_url is null if the URL could not be issued; fetch the
    photo again to get one.
    """

    id: str
    title: str
    description: str
    object_key: str
    tags: list[str]
    location: str | None = None
    camera: str | None = None
    likes: int
    created_at: AwareDatetime
    updated_at: AwareDatetime
    image_url: str | None = None
    image_url_expires_at: AwareDatetime | None = None

    @classmethod
    def from_result(cls, item: PhotoWithUrl) -> PhotoResponse:
        p = item.photo
        grant = item.download
        return cls(
            id=p.id,
            title=p.title,
            description=p.description,
            object_key=p.object_key,
            tags=list(p.tags),
            location=p.location,
            camera=p.camera,
            likes=p.likes,
            created_at=p.created_at,
            updated_at=p.updated_at,
            image_url=grant.url if grant else None,
            image_url_expires_at=grant.expires_at if grant else None,
        )


class PhotoListResponse(BaseModel):
    """Response for GET /photos (one page, newest first)."""

    rows: list[PhotoResponse]
    page: int
    page_size: int
    total_pages: int
    total_count: int


class PhotoDeleteResponse(BaseModel):
    """Response for DELETE /photos/{id}."""

    success: bool = True
    message: str = "Photo deleted successfully"


class UploadTargetRequest(BaseModel):
    """Request body for POST /photos/presigned-url."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=255)


class UploadTargetResponse(BaseModel):
    """Where to PUT the image bytes, and the object_key to send on create/update."""

    upload_url: str
    object_key: str
    content_type: str
    expires_at: datetime

    @classmethod
    def from_target(cls, target: UploadTarget) -> UploadTargetResponse:
        return cls(
            upload_url=target.url,
            object_key=target.object_key,
            content_type=target.content_type,
            expires_at=target.expires_at,
        )
