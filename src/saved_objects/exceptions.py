"""Custom exceptions for saved objects.

Exception Hierarchy:
    SavedObjectsError (base)
    ├── InvalidRequestError (malformed or contradictory request, 400)
    ├── InvalidFileTypeError (rejected upload, 400)
    ├── ObjectNotFoundError (unknown type/id, 404)
    └── ConflictError (identity already exists, 409)

These are request-level errors. Per-object import failures are not raised;
they are reported in the import result.
"""

from typing import Any


class SavedObjectsError(Exception):
    """Base exception for request-level saved object errors.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code for API responses.
    """

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the JSON error body."""
        return {
            "statusCode": self.status_code,
            "error": self.error,
            "message": self.message,
        }


class InvalidRequestError(SavedObjectsError):
    """Raised when a request has a malformed or contradictory shape."""

    status_code = 400
    error = "Bad Request"


class InvalidFileTypeError(SavedObjectsError):
    """Raised when an import upload has a disallowed extension or content type."""

    status_code = 400
    error = "Bad Request"


class ObjectNotFoundError(SavedObjectsError):
    """Raised when a requested saved object does not exist."""

    status_code = 404
    error = "Not Found"

    def __init__(self, object_type: str, object_id: str, message: str | None = None) -> None:
        self.object_type = object_type
        self.object_id = object_id
        super().__init__(message or f"Saved object [{object_type}/{object_id}] not found")


class ConflictError(SavedObjectsError):
    """Raised when a saved object identity already exists."""

    status_code = 409
    error = "Conflict"

    def __init__(self, object_type: str, object_id: str) -> None:
        self.object_type = object_type
        self.object_id = object_id
        super().__init__(
            f"Saved object [{object_type}/{object_id}] conflict"
        )
