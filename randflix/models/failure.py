"""
Failure classification for storage and API errors.

Every failure the storage layer can report is a subclass of KnownError,
carrying a FailureKind, a user-appropriate message, and the HTTP status the
API layer should answer with.

Absence on read is NOT a failure: get_title and random_title return None.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input failures
    INVALID_INPUT = "invalid_input"
    INVALID_FILTER = "invalid_filter"

    # Resource failures
    NOT_FOUND = "not_found"
    DUPLICATE_ID = "duplicate_id"

    # Backend failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    OPERATION_TIMEOUT = "operation_timeout"
    TRANSPORT_ERROR = "transport_error"

    # Startup failures
    INVALID_CONFIG = "invalid_config"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the caller",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail response body."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(KnownError):
    """
    Base class for failures raised by a storage engine.

    Attributes:
        operation: Storage operation that failed (e.g. "add_title")
        title_id: ID of the title involved, when there is one
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        operation: str,
        title_id: str | None = None,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 500,
    ):
        self.operation = operation
        self.title_id = title_id
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion=suggestion,
            status_code=status_code,
        )


class DuplicateTitleError(StorageError):
    """Raised when adding a title whose ID is already stored."""

    def __init__(self, title_id: str):
        super().__init__(
            kind=FailureKind.DUPLICATE_ID,
            message=f"title already exists with id: '{title_id}'",
            operation="add_title",
            title_id=title_id,
            suggestion="Use an update to replace an existing title.",
            status_code=409,
        )


class TitleNotFoundError(StorageError):
    """Raised when updating a title whose ID is not stored."""

    def __init__(self, title_id: str):
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"title does not exist with id: '{title_id}'",
            operation="update_title",
            title_id=title_id,
            suggestion="Create the title before updating it.",
            status_code=404,
        )


class UnsupportedFilterError(StorageError):
    """
    Raised when a filter cannot be interpreted by an engine.

    Filters are inert values; this is raised at interpretation time,
    before any candidate is collected or any network call is made.
    """

    def __init__(self, title_filter: Any, reason: str | None = None):
        self.title_filter = title_filter
        message = f"unsupported title filter type: {type(title_filter).__name__}"
        if reason:
            message = f"invalid title filter {title_filter!r}: {reason}"
        super().__init__(
            kind=FailureKind.INVALID_FILTER,
            message=message,
            operation="random_title",
            status_code=400,
        )


class BackendUnavailableError(StorageError):
    """Raised when a storage backend cannot be reached at construction."""

    def __init__(self, server: str, detail: str | None = None):
        self.server = server
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=f"failed to connect to storage backend '{server}'",
            operation="connect",
            detail=detail,
            status_code=503,
        )


class OperationTimeoutError(StorageError):
    """Raised when a single backend call exceeds its timeout. Retryable."""

    def __init__(
        self,
        operation: str,
        timeout: float,
        title_id: str | None = None,
        detail: str | None = None,
    ):
        self.timeout = timeout
        super().__init__(
            kind=FailureKind.OPERATION_TIMEOUT,
            message=f"{operation} timed out after {timeout:g}s",
            operation=operation,
            title_id=title_id,
            detail=detail,
            suggestion="Retry the request.",
        )


class StorageTransportError(StorageError):
    """Raised for any other failure reported by a storage backend."""

    def __init__(self, operation: str, title_id: str | None = None, detail: str | None = None):
        super().__init__(
            kind=FailureKind.TRANSPORT_ERROR,
            message=f"{operation} failed",
            operation=operation,
            title_id=title_id,
            detail=detail,
        )


class UnsupportedStorageKindError(KnownError):
    """Raised at startup when the configured storage kind is unknown."""

    def __init__(self, storage_kind: str, supported: list[str]):
        self.storage_kind = storage_kind
        self.supported = supported
        super().__init__(
            kind=FailureKind.INVALID_CONFIG,
            message=f"storage kind not supported: '{storage_kind}'",
            detail=f"Supported kinds: {', '.join(supported)}",
            status_code=500,
        )
