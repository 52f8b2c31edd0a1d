"""Local object-store grant endpoints.

Stand-in for presigned S3 URLs when STORAGE_BACKEND=local: upload URLs are
single-use PUT tokens, download URLs are GET tokens valid until expiry. With
the s3 backend these routes answer 404.
"""

import io
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import StreamingResponse

from app.api.v1.dependencies import get_storage_service
from app.application.interfaces.storage import IStorageService
from app.infrastructure.external.storage.local_storage import LocalStorageService

logger = logging.getLogger(__name__)

router = APIRouter()


def _local_storage(
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> LocalStorageService:
    if not isinstance(storage, LocalStorageService):
        raise HTTPException(status_code=404, detail="Not found")
    return storage


LocalStorageDep = Annotated[LocalStorageService, Depends(_local_storage)]


@router.put("/upload/{token}", status_code=200)
async def upload_with_grant(
    token: str,
    request: Request,
    storage: LocalStorageDep,
) -> Response:
    """Store the request body under the key the token was issued for."""
    grant = storage.redeem_upload_token(token)
    if grant is None:
        raise HTTPException(status_code=403, detail="Upload URL is invalid or expired")
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if grant.content_type and content_type != grant.content_type:
        raise HTTPException(
            status_code=400,
            detail=f"Content-Type must be {grant.content_type}",
        )
    body = await request.body()
    await storage.upload(io.BytesIO(body), grant.storage_ref, content_type)
    logger.info("Stored %d bytes at %s", len(body), grant.storage_ref)
    return Response(status_code=200)


@router.get("/download/{token}")
async def download_with_grant(token: str, storage: LocalStorageDep) -> StreamingResponse:
    """Stream the object the token was issued for."""
    storage_ref = storage.validate_download_token(token)
    if storage_ref is None:
        raise HTTPException(status_code=403, detail="Download URL is invalid or expired")
    if not await storage.exists(storage_ref):
        raise HTTPException(status_code=404, detail="Object not found")
    media_type = await storage.content_type(storage_ref)
    return StreamingResponse(storage.download(storage_ref), media_type=media_type)
