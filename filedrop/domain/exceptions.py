"""Domain exceptions for the filedrop service.

Defines domain-level exceptions that represent invalid requests or missing
resources. These exceptions are independent of the web framework; the
presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class FileDropException(Exception):
    """Base exception for all filedrop application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description (returned to the caller).
        error_code: Machine-readable error code (logged, selects HTTP status).
        details: Additional error context (e.g. field, key, bucket).
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
        """Error body returned by the API: ``{success: false, error: message}``."""
        return {"success": False, "error": self.message}


class ValidationException(FileDropException):
    """Raised when request input is missing or invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional form field or parameter that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class PayloadTooLargeException(FileDropException):
    """Raised when the declared request size exceeds the upload limit."""

    def __init__(self, max_bytes: int, declared: int | None = None) -> None:
        details: dict[str, Any] = {"max_bytes": max_bytes}
        if declared is not None:
            details["content_length"] = declared
        super().__init__(
            f"File too large (max {max_bytes // (1024 * 1024)}MB)",
            "PAYLOAD_TOO_LARGE",
            details,
        )


class AuthenticationException(FileDropException):
    """Raised when the bearer token is missing, malformed or wrong.

    The message is deliberately the same for every cause.
    """

    def __init__(self, reason: str | None = None) -> None:
        """Initialize; reason is kept in details for logs only.

        Args:
            reason: Internal description of which check failed.
        """
        details = {"reason": reason} if reason else {}
        super().__init__("Authentication required", "AUTHENTICATION_ERROR", details)


class ResourceNotFoundException(FileDropException):
    """Raised when a requested object (or bucket list) does not exist."""

    def __init__(self, message: str, resource_type: str, resource_id: str) -> None:
        """Initialize with the caller-facing message and the missing resource.

        Args:
            message: Human-readable message (e.g. 'File not found').
            resource_type: Type of resource (e.g. 'file', 'bucket').
            resource_id: The key or name that was not found.
        """
        super().__init__(
            message,
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class NoBucketsAvailableException(FileDropException):
    """Raised when a request needs a bucket but none is bound."""

    def __init__(self) -> None:
        super().__init__("No buckets available", "NO_BUCKETS_AVAILABLE")
