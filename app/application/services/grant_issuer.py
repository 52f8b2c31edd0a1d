"""Grant issuance: time-boxed, single-operation URLs scoped to one object key."""

from __future__ import annotations

import fnmatch
import logging
from datetime import timedelta

from app.application.dtos.photo import Grant, UploadTarget
from app.application.interfaces.storage import IStorageService
from app.application.services.object_key_scheme import (
    ObjectKeyScheme,
    extension_from_filename,
)
from app.domain.enums import GrantMethod
from app.domain.exceptions import StoreUnavailableException, ValidationException
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_TTL = timedelta(minutes=5)
DEFAULT_DOWNLOAD_TTL = timedelta(hours=1)


class GrantIssuer:
    """Issues upload (PUT) and download (GET) grants without exposing store credentials.

    Issuing a grant never creates or touches the object; only the grant holder's
    transfer does. Any failure while minting is raised as StoreUnavailableException.
    """

    def __init__(
        self,
        storage_service: IStorageService,
        key_scheme: ObjectKeyScheme,
        *,
        upload_ttl: timedelta = DEFAULT_UPLOAD_TTL,
        download_ttl: timedelta = DEFAULT_DOWNLOAD_TTL,
        allowed_content_types: list[str] | None = None,
    ) -> None:
        self.storage = storage_service
        self.key_scheme = key_scheme
        self.upload_ttl = upload_ttl
        self.download_ttl = download_ttl
        self.allowed_content_types = allowed_content_types or ["image/*"]

    async def issue_upload_grant(self, object_key: str, content_type: str) -> Grant:
        """Return a PUT grant for object_key, valid for upload_ttl."""
        expires_at = utc_now() + self.upload_ttl
        try:
            url = await self.storage.generate_upload_url(
                object_key, content_type, expiration=self.upload_ttl
            )
        except Exception as e:
            logger.error("Upload grant failed for %s: %s", object_key, e)
            raise StoreUnavailableException(
                "object_store", "issue_upload_grant", str(e), object_key=object_key
            ) from e
        return Grant(
            url=url,
            object_key=object_key,
            method=GrantMethod.PUT,
            expires_at=expires_at,
        )

    async def issue_download_grant(self, object_key: str) -> Grant:
        """Return a GET grant for object_key, valid for download_ttl."""
        expires_at = utc_now() + self.download_ttl
        try:
            url = await self.storage.generate_download_url(
                object_key, expiration=self.download_ttl
            )
        except Exception as e:
            logger.error("Download grant failed for %s: %s", object_key, e)
            raise StoreUnavailableException(
                "object_store", "issue_download_grant", str(e), object_key=object_key
            ) from e
        return Grant(
            url=url,
            object_key=object_key,
            method=GrantMethod.GET,
            expires_at=expires_at,
        )

    def _check_content_type(self, content_type: str) -> str:
        normalized = (content_type or "").strip().lower()
        if not normalized:
            raise ValidationException("Content type is required", field="content_type")
        if not any(fnmatch.fnmatch(normalized, p) for p in self.allowed_content_types):
            raise ValidationException(
                f"Content type not allowed: {normalized}", field="content_type"
            )
        return normalized

    async def issue_upload_target(self, filename: str, content_type: str) -> UploadTarget:
        """Mint a fresh object key for filename and an upload grant for it.

        The returned object_key is what the client reports back on create/update
        after its PUT succeeds.
        """
        if not filename or not filename.strip():
            raise ValidationException("Filename is required", field="filename")
        normalized = self._check_content_type(content_type)
        object_key = self.key_scheme.new_key(extension_from_filename(filename))
        grant = await self.issue_upload_grant(object_key, normalized)
        logger.info("Issued upload grant for %s (expires %s)", object_key, grant.expires_at)
        return UploadTarget(
            url=grant.url,
            object_key=object_key,
            content_type=normalized,
            expires_at=grant.expires_at,
        )
