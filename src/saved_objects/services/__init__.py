"""Service layer for business logic."""

from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.services.saved_object_service import SavedObjectService

__all__ = ["ExportService", "ImportService", "SavedObjectService"]
