"""Data models for saved objects."""

from saved_objects.models.export_import import (
    BatchResult,
    CopiedAs,
    Created,
    ExportDetails,
    ExportRequest,
    ExportResult,
    Failed,
    ImportErrorDetail,
    ImportFailure,
    ImportOptions,
    ImportOutcome,
    ImportResult,
    ImportSuccess,
    Overwritten,
)
from saved_objects.models.saved_object import (
    FindResult,
    ObjectIdentity,
    SavedObject,
    SavedObjectCreate,
    SavedObjectReference,
)

__all__ = [
    # Saved object models
    "SavedObject",
    "SavedObjectCreate",
    "SavedObjectReference",
    "ObjectIdentity",
    "FindResult",
    # Export models
    "ExportRequest",
    "ExportDetails",
    "ExportResult",
    # Import models
    "ImportOptions",
    "ImportErrorDetail",
    "ImportOutcome",
    "Created",
    "Overwritten",
    "CopiedAs",
    "Failed",
    "BatchResult",
    "ImportSuccess",
    "ImportFailure",
    "ImportResult",
]
