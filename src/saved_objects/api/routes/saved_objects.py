"""REST API endpoints for saved objects and their export/import."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Query, Request, Response, UploadFile

from saved_objects.config.settings import Settings
from saved_objects.exceptions import InvalidRequestError
from saved_objects.models.export_import import ExportRequest, ImportOptions
from saved_objects.models.saved_object import SavedObjectCreate
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.services.saved_object_service import SavedObjectService
from saved_objects.utils.validators import validate_import_file, validate_import_flags

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/ndjson"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_saved_object_service(request: Request) -> SavedObjectService:
    return request.app.state.saved_object_service


def get_export_service(request: Request) -> ExportService:
    return request.app.state.export_service


def get_import_service(request: Request) -> ImportService:
    return request.app.state.import_service


def require_xsrf_header(request: Request) -> None:
    """Reject mutating requests that lack the XSRF header."""
    settings: Settings = request.app.state.settings
    if settings.require_xsrf_header and settings.xsrf_header not in request.headers:
        raise InvalidRequestError(f"Request must contain a {settings.xsrf_header} header.")


router = APIRouter(prefix="/api/saved_objects", tags=["saved_objects"])


@router.post("/_export", dependencies=[Depends(require_xsrf_header)])
async def export_objects(
    body: ExportRequest,
    service: ExportService = Depends(get_export_service),
) -> Response:
    """Export saved objects as an NDJSON attachment."""
    content = await service.export_ndjson(body)
    return Response(
        content=content,
        media_type=NDJSON_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="export.ndjson"'},
    )


@router.post("/_import", dependencies=[Depends(require_xsrf_header)])
async def import_objects(
    file: UploadFile = File(..., description="NDJSON file to import"),
    overwrite: bool = Query(False, description="Replace existing objects"),
    create_new_copies: bool = Query(
        False, alias="createNewCopies", description="Import every object under a new id"
    ),
    service: ImportService = Depends(get_import_service),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Import saved objects from an uploaded NDJSON file."""
    # Reject the request before reading the upload
    validate_import_flags(overwrite, create_new_copies)
    validate_import_file(file.filename, file.content_type, settings)

    raw = await file.read()
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidRequestError(f"Import file is not valid UTF-8: {e}") from e

    result = await service.import_ndjson(
        content,
        ImportOptions(overwrite=overwrite, create_new_copies=create_new_copies),
    )
    return result.to_response()


@router.get("/_find")
async def find_objects(
    type: list[str] | None = Query(None, description="Types to include"),
    search: str | None = Query(None, description="Title search"),
    page: int = Query(1, description="1-based page number"),
    per_page: int | None = Query(None, alias="perPage", description="Page size"),
    service: SavedObjectService = Depends(get_saved_object_service),
) -> dict[str, Any]:
    """Find saved objects by type and title."""
    result = await service.find(types=type, search=search, page=page, per_page=per_page)
    return result.to_response()


@router.get("/{type}/{id}")
async def get_object(
    type: str,
    id: str,
    service: SavedObjectService = Depends(get_saved_object_service),
) -> dict[str, Any]:
    """Get a single saved object."""
    obj = await service.get(type, id)
    return obj.to_record()


@router.post("/{type}", dependencies=[Depends(require_xsrf_header)])
async def create_object_with_generated_id(
    type: str,
    body: SavedObjectCreate = Body(...),
    service: SavedObjectService = Depends(get_saved_object_service),
) -> dict[str, Any]:
    """Create a saved object with a generated id."""
    obj = await service.create(type, None, body)
    return obj.to_record()


@router.post("/{type}/{id}", dependencies=[Depends(require_xsrf_header)])
async def create_object(
    type: str,
    id: str,
    body: SavedObjectCreate = Body(...),
    overwrite: bool = Query(False),
    service: SavedObjectService = Depends(get_saved_object_service),
) -> dict[str, Any]:
    """Create a saved object, or replace it with overwrite=true."""
    obj = await service.create(type, id, body, overwrite=overwrite)
    return obj.to_record()


@router.delete("/{type}/{id}", dependencies=[Depends(require_xsrf_header)])
async def delete_object(
    type: str,
    id: str,
    service: SavedObjectService = Depends(get_saved_object_service),
) -> dict[str, Any]:
    """Delete a saved object."""
    await service.delete(type, id)
    return {}
