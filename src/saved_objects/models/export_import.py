"""Export/Import models.

Wire shapes use camelCase (`includeReferencesDeep`, `successCount`, ...);
every model also accepts its snake_case field names so services and tests
can build them directly.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from saved_objects.models.saved_object import ObjectIdentity, SavedObject


class ExportRequest(BaseModel):
    """Export selection and flags."""

    model_config = ConfigDict(populate_by_name=True)

    type: str | list[str] | None = None
    objects: list[ObjectIdentity] | None = None
    include_references_deep: bool = Field(default=False, alias="includeReferencesDeep")
    exclude_export_details: bool = Field(default=False, alias="excludeExportDetails")

    @property
    def types(self) -> list[str] | None:
        """Type filter normalised to a list."""
        if self.type is None:
            return None
        if isinstance(self.type, str):
            return [self.type]
        return list(self.type)


class ExportDetails(BaseModel):
    """Summary record written as the last line of an export."""

    model_config = ConfigDict(populate_by_name=True)

    exported_count: int = Field(default=0, alias="exportedCount")
    missing_ref_count: int = Field(default=0, alias="missingRefCount")
    missing_references: list[ObjectIdentity] = Field(
        default_factory=list, alias="missingReferences"
    )
    missing_objects: list[ObjectIdentity] = Field(default_factory=list, alias="missingObjects")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ExportResult(BaseModel):
    """Objects selected for export plus the summary record."""

    objects: list[SavedObject]
    details: ExportDetails


class ImportOptions(BaseModel):
    """Import mode flags."""

    model_config = ConfigDict(populate_by_name=True)

    overwrite: bool = False
    create_new_copies: bool = Field(default=False, alias="createNewCopies")


class ImportErrorDetail(BaseModel):
    """Reason attached to a failed import record."""

    type: Literal["conflict", "missing_references", "unsupported_type", "malformed_record"]
    message: str | None = None
    references: list[ObjectIdentity] | None = None


# Per-object outcomes, tagged by `kind`


class Created(BaseModel):
    kind: Literal["created"] = "created"
    type: str
    id: str
    title: str | None = None


class Overwritten(BaseModel):
    kind: Literal["overwritten"] = "overwritten"
    type: str
    id: str
    title: str | None = None


class CopiedAs(BaseModel):
    kind: Literal["copied"] = "copied"
    type: str
    id: str
    destination_id: str
    title: str | None = None


class Failed(BaseModel):
    kind: Literal["failed"] = "failed"
    type: str
    id: str
    error: ImportErrorDetail
    title: str | None = None


ImportOutcome = Annotated[
    Created | Overwritten | CopiedAs | Failed, Field(discriminator="kind")
]


class ImportSuccess(BaseModel):
    """Entry of `ImportResult.successResults`."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    id: str
    destination_id: str = Field(alias="destinationId")
    overwrite: bool | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class ImportFailure(BaseModel):
    """Entry of `ImportResult.errors`."""

    type: str
    id: str
    title: str | None = None
    error: ImportErrorDetail


class ImportResult(BaseModel):
    """Result of an import request."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    success_count: int = Field(alias="successCount")
    success_results: list[ImportSuccess] = Field(default_factory=list, alias="successResults")
    errors: list[ImportFailure] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        """Serialize to the JSON response body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BatchResult(BaseModel):
    """Ordered per-object outcomes of one import request."""

    outcomes: list[ImportOutcome] = Field(default_factory=list)

    def to_import_result(self) -> ImportResult:
        successes: list[ImportSuccess] = []
        failures: list[ImportFailure] = []

        for outcome in self.outcomes:
            meta = {"title": outcome.title} if outcome.title else {}
            if isinstance(outcome, Failed):
                failures.append(
                    ImportFailure(
                        type=outcome.type,
                        id=outcome.id,
                        title=outcome.title,
                        error=outcome.error,
                    )
                )
            elif isinstance(outcome, CopiedAs):
                successes.append(
                    ImportSuccess(
                        type=outcome.type,
                        id=outcome.id,
                        destination_id=outcome.destination_id,
                        meta=meta,
                    )
                )
            else:
                successes.append(
                    ImportSuccess(
                        type=outcome.type,
                        id=outcome.id,
                        destination_id=outcome.id,
                        overwrite=True if isinstance(outcome, Overwritten) else None,
                        meta=meta,
                    )
                )

        return ImportResult(
            success=not failures,
            success_count=len(successes),
            success_results=successes,
            errors=failures,
        )
