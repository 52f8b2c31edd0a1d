"""Photo API: thin routes delegating to PhotoUploadCoordinator and PhotoQueryService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_grant_issuer,
    get_photo_coordinator,
    get_photo_query_service,
)
from app.application.services.grant_issuer import GrantIssuer
from app.application.use_cases.photos import (
    PhotoQueryService,
    PhotoUploadCoordinator,
)
from app.core.limiter import limit_upload, limit_writes
from app.schemas.photo import (
    PhotoCreateRequest,
    PhotoDeleteResponse,
    PhotoListResponse,
    PhotoResponse,
    PhotoUpdateRequest,
    UploadTargetRequest,
    UploadTargetResponse,
)

router = APIRouter()

CoordinatorDep = Annotated[PhotoUploadCoordinator, Depends(get_photo_coordinator)]
QueryDep = Annotated[PhotoQueryService, Depends(get_photo_query_service)]


@router.get("", response_model=PhotoListResponse)
async def list_photos(
    query_svc: QueryDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=1)] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    tag: Annotated[str | None, Query(max_length=50)] = None,
) -> PhotoListResponse:
    """List photos newest first; search matches title or description, tag is exact."""
    result = await query_svc.list_photos(
        page=page, page_size=page_size, search=search, tag=tag
    )
    return PhotoListResponse(
        rows=[PhotoResponse.from_result(r) for r in result.rows],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )


@router.get("/tags/all", response_model=list[str])
async def list_tags(query_svc: QueryDep) -> list[str]:
    """Every tag in use, sorted and de-duplicated."""
    return await query_svc.list_tags()


@router.post("/presigned-url", response_model=UploadTargetResponse)
@limit_upload
async def issue_upload_target(
    request: Request,
    body: UploadTargetRequest,
    grant_issuer: Annotated[GrantIssuer, Depends(get_grant_issuer)],
) -> UploadTargetResponse:
    """Mint an object key and a short-lived upload URL for it."""
    target = await grant_issuer.issue_upload_target(body.filename, body.content_type)
    return UploadTargetResponse.from_target(target)


@router.get("/{photo_id}", response_model=PhotoResponse)
async def get_photo(photo_id: str, query_svc: QueryDep) -> PhotoResponse:
    """Get one photo with a fresh download URL."""
    return PhotoResponse.from_result(await query_svc.get_photo(photo_id))


@router.post("", response_model=PhotoResponse, status_code=201)
@limit_writes
async def create_photo(
    request: Request,
    body: PhotoCreateRequest,
    coordinator: CoordinatorDep,
    query_svc: QueryDep,
) -> PhotoResponse:
    """Create a photo bound to an object_key the client already uploaded to."""
    created = await coordinator.create(
        title=body.title,
        description=body.description,
        object_key=body.object_key,
        tags=body.tags,
        location=body.location,
        camera=body.camera,
    )
    return PhotoResponse.from_result(await query_svc.after_write(created))


@router.put("/{photo_id}", response_model=PhotoResponse)
@router.patch("/{photo_id}", response_model=PhotoResponse)
@limit_writes
async def update_photo(
    request: Request,
    photo_id: str,
    body: PhotoUpdateRequest,
    coordinator: CoordinatorDep,
    query_svc: QueryDep,
) -> PhotoResponse:
    """Partial update; a new object_key replaces (and deletes) the old image."""
    updated = await coordinator.update(photo_id, body.to_update())
    return PhotoResponse.from_result(await query_svc.after_write(updated))


@router.delete("/{photo_id}", response_model=PhotoDeleteResponse)
@limit_writes
async def delete_photo(
    request: Request,
    photo_id: str,
    coordinator: CoordinatorDep,
) -> PhotoDeleteResponse:
    """Delete the image, then the record."""
    await coordinator.delete(photo_id)
    return PhotoDeleteResponse()


@router.put("/{photo_id}/like", response_model=PhotoResponse)
@limit_writes
async def like_photo(
    request: Request,
    photo_id: str,
    coordinator: CoordinatorDep,
    query_svc: QueryDep,
) -> PhotoResponse:
    """Add one like (atomic increment)."""
    liked = await coordinator.like(photo_id)
    return PhotoResponse.from_result(await query_svc.after_write(liked))
