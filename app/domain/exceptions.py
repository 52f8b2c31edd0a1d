"""Domain exceptions for the photo catalog.

Defines domain-level exceptions that represent business rule violations
and store failures seen by the use cases. Presentation layer maps them to
HTTP responses in exception handlers using error_code.
"""

from typing import Any


class PhotoCatalogException(Exception):
    """Base exception for all photo catalog errors.

    All custom exceptions inherit from this class to allow consistent error
    handling and logging. Presentation layer maps these to HTTP responses
    using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (stable across releases).
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the structured error body sent to API callers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PhotoCatalogException):
    """Raised when input validation fails. No store interaction has happened yet."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(PhotoCatalogException):
    """Raised when a requested resource is not found.

    For deletes this also signals the terminal state: the record is already gone.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'photo').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class StoreUnavailableException(PhotoCatalogException):
    """Raised when the object store or the metadata store fails or is unreachable.

    The current operation was aborted; nothing visible was changed by it.
    """

    def __init__(
        self,
        store: str,
        operation: str,
        reason: str | None = None,
        **details_extra: Any,
    ) -> None:
        """Initialize with the failing store and operation.

        Args:
            store: 'object_store' or 'metadata_store'.
            operation: Operation that failed (e.g. 'delete_object', 'issue_download_grant').
            reason: Optional short reason (e.g. 'object_not_found').
            **details_extra: Optional keys merged into details (e.g. object_key).
        """
        details: dict[str, Any] = {"store": store, "operation": operation}
        if reason:
            details["reason"] = reason
        details.update(details_extra)
        super().__init__(
            f"{store.replace('_', ' ').capitalize()} unavailable during {operation}",
            "STORE_UNAVAILABLE",
            details,
        )


class ConflictOnCleanupException(PhotoCatalogException):
    """Raised when a step after a completed object-store change failed.

    The two stores are now known to disagree (dangling reference or orphaned
    object). Distinct from StoreUnavailableException so operators can reconcile.
    """

    def __init__(
        self,
        photo_id: str,
        object_key: str,
        inconsistency: str,
        reason: str | None = None,
    ) -> None:
        """Initialize with the affected record and the kind of inconsistency.

        Args:
            photo_id: Photo record involved.
            object_key: Object key involved.
            inconsistency: 'dangling_reference' or 'orphaned_object'.
            reason: Optional underlying error text.
        """
        details: dict[str, Any] = {
            "photo_id": photo_id,
            "object_key": object_key,
            "inconsistency": inconsistency,
        }
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Stores left inconsistent for photo {photo_id}: {inconsistency}",
            "CONFLICT_ON_CLEANUP",
            details,
        )


class SqlNotConfiguredException(PhotoCatalogException):
    """Raised when a database session is requested but no engine could be created."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
