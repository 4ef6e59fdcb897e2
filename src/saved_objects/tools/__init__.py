"""MCP tool implementations for saved objects.

Tools never raise to the MCP client. Failures come back as a dict with
`error: True` so the caller can branch on it.
"""

from datetime import datetime, timezone
from typing import Any

from saved_objects.exceptions import SavedObjectsError

__all__ = ["create_error_response", "error_from_exception"]


def create_error_response(
    message: str,
    error_type: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the error dict returned by a failed tool call.

    Args:
        message: Human readable reason
        error_type: Exception class name, e.g. ConflictError
        details: Extra context such as the HTTP status the error maps to
    """
    response: dict[str, Any] = {
        "error": True,
        "message": message,
        "error_type": error_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        response["details"] = details
    return response


def error_from_exception(
    error: SavedObjectsError, include_status: bool = False
) -> dict[str, Any]:
    """Convert a saved objects exception into a tool error dict."""
    return create_error_response(
        message=error.message,
        error_type=error.__class__.__name__,
        details={"statusCode": error.status_code} if include_status else None,
    )
