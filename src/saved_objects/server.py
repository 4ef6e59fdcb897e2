"""MCP server implementation for saved objects."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from saved_objects.config.settings import Settings
from saved_objects.db.database import Database
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.services.saved_object_service import SavedObjectService
from saved_objects.tools import export_import_tools, saved_object_tools

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("saved-objects")

# Global service instances (initialized in main)
saved_object_service: SavedObjectService | None = None
export_service: ExportService | None = None
import_service: ImportService | None = None
db: Database | None = None


async def initialize_services(settings: Settings) -> None:
    """Initialize all services and database.

    Args:
        settings: Application settings
    """
    global saved_object_service, export_service, import_service, db

    db = Database(settings.database_path)
    await db.connect()
    await db.migrate()

    repository = SavedObjectRepository(db)
    saved_object_service = SavedObjectService(repository, settings)
    export_service = ExportService(repository, settings)
    import_service = ImportService(repository, db, settings)

    logger.info("Services initialized (database=%s)", settings.database_path)


async def shutdown_services() -> None:
    """Shutdown all services and close database."""
    global db
    if db:
        await db.close()
        db = None


def create_server() -> FastMCP:
    """Return the configured MCP server."""
    return mcp


@mcp.tool()
async def saved_object_get(type: str, id: str) -> dict[str, Any]:
    """Get a saved object by type and ID.

    Args:
        type: Saved object type (e.g. dashboard, visualization, index-pattern)
        id: Saved object ID

    Returns:
        The saved object or error if not found
    """
    if not saved_object_service:
        raise RuntimeError("Services not initialized")
    return await saved_object_tools.saved_object_get(saved_object_service, type, id)


@mcp.tool()
async def saved_object_find(
    types: list[str] | None = None,
    search: str | None = None,
    page: int = 1,
    per_page: int | None = None,
) -> dict[str, Any]:
    """Find saved objects by type and title.

    Args:
        types: Types to include (all supported types when omitted)
        search: Case-insensitive title substring
        page: 1-based page number
        per_page: Page size

    Returns:
        Page of saved objects with total count
    """
    if not saved_object_service:
        raise RuntimeError("Services not initialized")
    return await saved_object_tools.saved_object_find(
        saved_object_service, types, search, page, per_page
    )


@mcp.tool()
async def saved_object_delete(type: str, id: str) -> dict[str, Any]:
    """Delete a saved object.

    Args:
        type: Saved object type
        id: Saved object ID

    Returns:
        Deletion confirmation
    """
    if not saved_object_service:
        raise RuntimeError("Services not initialized")
    return await saved_object_tools.saved_object_delete(saved_object_service, type, id)


@mcp.tool()
async def saved_objects_export(
    types: list[str] | None = None,
    objects: list[dict[str, str]] | None = None,
    include_references_deep: bool = False,
    exclude_export_details: bool = False,
) -> dict[str, Any]:
    """Export saved objects to NDJSON.

    Args:
        types: Type filter (use either types or objects)
        objects: Explicit list of {"type": ..., "id": ...}
        include_references_deep: Include every transitively referenced object
        exclude_export_details: Omit the trailing summary record

    Returns:
        NDJSON content, line count and content type
    """
    if not export_service:
        raise RuntimeError("Services not initialized")
    return await export_import_tools.saved_objects_export(
        export_service, types, objects, include_references_deep, exclude_export_details
    )


@mcp.tool()
async def saved_objects_import(
    content: str,
    filename: str = "export.ndjson",
    overwrite: bool = False,
    create_new_copies: bool = False,
) -> dict[str, Any]:
    """Import saved objects from NDJSON content.

    Args:
        content: NDJSON content, one saved object per line
        filename: File name (must carry an accepted extension)
        overwrite: Replace existing objects with the same type and ID
        create_new_copies: Import every object under a new ID

    Returns:
        success, successCount, successResults and errors
    """
    if not import_service:
        raise RuntimeError("Services not initialized")
    return await export_import_tools.saved_objects_import(
        import_service, content, filename, overwrite, create_new_copies
    )
