"""S3-compatible object storage (AWS S3, MinIO, etc.) with presigned PUT/GET grants."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterator
from datetime import timedelta
from io import BytesIO
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageGrantError,
    StorageNotFoundError,
    StorageUploadError,
)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_not_found(e: ClientError) -> bool:
    return e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3StorageService:
    """S3-compatible storage with server-side encryption and presigned URLs.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces. Presigning is computed locally from
    the client's credentials; it does not contact the bucket.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            client: Prebuilt boto3 S3 client (tests); built from the other args if None.
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        if client is None:
            extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
            client = boto3.client(
                "s3",
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                **extra,
            )
        self._client = client

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Put object with a sha256 metadata entry."""
        def _upload() -> dict[str, Any]:
            file_data.seek(0)
            body = file_data.read()
            checksum = hashlib.sha256(body).hexdigest()
            meta = {"sha256": checksum, "original-size": str(len(body))}
            if metadata:
                for k, v in metadata.items():
                    meta[k.lower().replace("_", "-")] = v
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )
            return {"storage_ref": storage_ref, "checksum": checksum, "size": len(body)}

        try:
            return await asyncio.to_thread(_upload)
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream object content."""
        def _get() -> bytes:
            try:
                resp = self._client.get_object(Bucket=self.bucket, Key=storage_ref)
                return resp["Body"].read()
            except ClientError as e:
                if _is_not_found(e):
                    raise StorageNotFoundError(storage_ref) from e
                raise StorageDownloadError(storage_ref, str(e)) from e

        try:
            body = await asyncio.to_thread(_get)
        except StorageNotFoundError:
            raise
        except Exception as e:
            raise StorageDownloadError(storage_ref, str(e)) from e
        buf = BytesIO(body)
        while True:
            chunk = buf.read(self.CHUNK_SIZE)
            if not chunk:
                break
            yield chunk

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted, False if it did not exist."""
        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            except ClientError as e:
                if _is_not_found(e):
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        """Return True if object exists. Errors other than not-found propagate."""
        def _exists() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
                return True
            except ClientError as e:
                if _is_not_found(e):
                    return False
                raise StorageDownloadError(storage_ref, str(e)) from e

        return await asyncio.to_thread(_exists)

    async def generate_upload_url(
        self,
        storage_ref: str,
        content_type: str,
        expiration: timedelta = timedelta(minutes=5),
    ) -> str:
        """Return presigned PUT URL; the client must send the same Content-Type."""
        def _presign() -> str:
            return self._client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": storage_ref,
                    "ContentType": content_type,
                },
                ExpiresIn=int(expiration.total_seconds()),
            )

        try:
            return await asyncio.to_thread(_presign)
        except (ClientError, BotoCoreError) as e:
            raise StorageGrantError(storage_ref, "upload", str(e)) from e

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
    ) -> str:
        """Return presigned GET URL."""
        def _presign() -> str:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": storage_ref},
                ExpiresIn=int(expiration.total_seconds()),
            )

        try:
            return await asyncio.to_thread(_presign)
        except (ClientError, BotoCoreError) as e:
            raise StorageGrantError(storage_ref, "download", str(e)) from e
