"""Validation utilities for request input.

This module provides reusable validators shared by the HTTP API, the MCP
tools and the services so the same request is rejected the same way
whichever transport it arrives on.
"""

from pathlib import PurePath
from typing import TYPE_CHECKING

from saved_objects.exceptions import InvalidFileTypeError, InvalidRequestError

if TYPE_CHECKING:
    from saved_objects.config.settings import Settings


def validate_types(types: list[str], supported_types: list[str], action: str) -> list[str]:
    """Validate that every requested type is supported.

    Args:
        types: Requested saved object types
        supported_types: Types the store accepts
        action: Verb used in the error message (e.g. "export")

    Returns:
        The de-duplicated list of types, order preserved

    Raises:
        InvalidRequestError: If the list is empty or holds an unsupported type
    """
    if not types:
        raise InvalidRequestError(f"At least one type is required to {action}")

    unique = list(dict.fromkeys(types))
    unsupported = [t for t in unique if t not in supported_types]
    if unsupported:
        raise InvalidRequestError(
            f"Trying to {action} non-exportable type(s): {', '.join(unsupported)}"
        )
    return unique


def validate_import_flags(overwrite: bool, create_new_copies: bool) -> None:
    """Reject mutually exclusive import flags.

    Raises:
        InvalidRequestError: If both overwrite and create_new_copies are set
    """
    if overwrite and create_new_copies:
        raise InvalidRequestError("cannot use [overwrite] with [createNewCopies]")


def validate_import_file(
    filename: str | None,
    content_type: str | None,
    settings: "Settings",
) -> str:
    """Validate an import upload by extension and content type.

    Args:
        filename: Uploaded file name
        content_type: Declared content type (None when not supplied)
        settings: Settings with accepted extensions and content types

    Returns:
        The file extension (lowercase, with leading dot)

    Raises:
        InvalidFileTypeError: If the extension or content type is not accepted
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension not in settings.import_file_extensions:
        raise InvalidFileTypeError(f"Invalid file extension {extension or '(none)'}")

    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type not in settings.import_content_types:
            raise InvalidFileTypeError(f"Invalid file content type {media_type}")

    return extension


def validate_pagination(page: int, per_page: int, max_per_page: int) -> None:
    """Validate find pagination parameters.

    Raises:
        InvalidRequestError: If page < 1 or per_page outside 1..max_per_page
    """
    if page < 1:
        raise InvalidRequestError("page must be >= 1")
    if per_page < 1 or per_page > max_per_page:
        raise InvalidRequestError(f"perPage must be between 1 and {max_per_page}")
