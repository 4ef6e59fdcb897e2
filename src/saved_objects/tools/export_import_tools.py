"""Saved object export/import MCP tools."""

import logging
from typing import Any

from pydantic import ValidationError

from saved_objects.exceptions import SavedObjectsError
from saved_objects.models.export_import import ExportRequest
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.tools import create_error_response, error_from_exception

logger = logging.getLogger(__name__)


async def saved_objects_export(
    service: ExportService,
    types: list[str] | None = None,
    objects: list[dict[str, str]] | None = None,
    include_references_deep: bool = False,
    exclude_export_details: bool = False,
) -> dict[str, Any]:
    """Export saved objects as NDJSON.

    Args:
        service: Export service instance
        types: Type filter (mutually exclusive with objects)
        objects: Explicit list of {type, id} (mutually exclusive with types)
        include_references_deep: Follow references transitively
        exclude_export_details: Omit the trailing summary record

    Returns:
        NDJSON content and the export summary
    """
    try:
        request = ExportRequest(
            type=types,
            objects=objects,
            include_references_deep=include_references_deep,
            exclude_export_details=exclude_export_details,
        )
    except ValidationError as e:
        return create_error_response(
            message=f"Invalid export request: {e.errors()[0]['msg']}",
            error_type="InvalidRequestError",
        )

    try:
        content = await service.export_ndjson(request)
        line_count = sum(1 for line in content.splitlines() if line.strip())
    except SavedObjectsError as e:
        logger.warning("Export rejected: %s", e.message)
        return error_from_exception(e)

    return {
        "content": content,
        "line_count": line_count,
        "content_type": "application/ndjson",
    }


async def saved_objects_import(
    service: ImportService,
    content: str,
    filename: str = "export.ndjson",
    overwrite: bool = False,
    create_new_copies: bool = False,
) -> dict[str, Any]:
    """Import saved objects from NDJSON content.

    Args:
        service: Import service instance
        content: NDJSON content
        filename: File name used for extension validation
        overwrite: Replace existing objects
        create_new_copies: Import every object under a new id

    Returns:
        Import result (success, successCount, successResults, errors)
    """
    if content is None:
        return create_error_response(
            message="content is required",
            error_type="InvalidRequestError",
        )

    try:
        result = await service.import_file(
            content=content,
            filename=filename,
            overwrite=overwrite,
            create_new_copies=create_new_copies,
        )
    except SavedObjectsError as e:
        logger.warning("Import rejected: %s", e.message)
        return error_from_exception(e, include_status=True)

    return result.to_response()
