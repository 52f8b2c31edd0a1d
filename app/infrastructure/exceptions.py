"""Infrastructure exceptions for object storage operations.

Storage errors extend PhotoCatalogException so presentation can map them
to HTTP responses consistently. Use cases translate them into
StoreUnavailableException before they reach callers.
"""

from app.domain.exceptions import PhotoCatalogException


class StorageException(PhotoCatalogException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """File or object not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """File download failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to download file: {file_path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageGrantError(StorageException):
    """Could not mint an upload or download URL."""

    def __init__(self, file_path: str, operation: str, reason: str) -> None:
        super().__init__(
            f"Failed to issue {operation} grant for: {file_path}",
            "STORAGE_GRANT_ERROR",
            {"file_path": file_path, "operation": operation, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Insufficient permissions for storage operation (or invalid grant)."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )
