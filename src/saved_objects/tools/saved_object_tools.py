"""Saved object MCP tools."""

import logging
from typing import Any

from saved_objects.exceptions import SavedObjectsError
from saved_objects.services.saved_object_service import SavedObjectService
from saved_objects.tools import create_error_response, error_from_exception

logger = logging.getLogger(__name__)


async def saved_object_get(
    service: SavedObjectService,
    type: str,
    id: str,
) -> dict[str, Any]:
    """Get a saved object by type and ID.

    Args:
        service: Saved object service instance
        type: Saved object type
        id: Saved object ID

    Returns:
        The saved object or an error response
    """
    if not type or not id:
        return create_error_response(
            message="type and id are required",
            error_type="InvalidRequestError",
        )

    try:
        obj = await service.get(type, id)
    except SavedObjectsError as e:
        return error_from_exception(e)

    return obj.to_record()


async def saved_object_find(
    service: SavedObjectService,
    types: list[str] | None = None,
    search: str | None = None,
    page: int = 1,
    per_page: int | None = None,
) -> dict[str, Any]:
    """Find saved objects by type and title.

    Args:
        service: Saved object service instance
        types: Types to include (all supported types when omitted)
        search: Title substring
        page: 1-based page number
        per_page: Page size

    Returns:
        Page of saved objects with total count
    """
    try:
        result = await service.find(types=types, search=search, page=page, per_page=per_page)
    except SavedObjectsError as e:
        logger.warning("Find rejected: %s", e.message)
        return error_from_exception(e)

    return result.to_response()


async def saved_object_delete(
    service: SavedObjectService,
    type: str,
    id: str,
) -> dict[str, Any]:
    """Delete a saved object.

    Args:
        service: Saved object service instance
        type: Saved object type
        id: Saved object ID

    Returns:
        Deletion confirmation or an error response
    """
    try:
        await service.delete(type, id)
    except SavedObjectsError as e:
        return error_from_exception(e)

    return {"deleted": True, "type": type, "id": id}
