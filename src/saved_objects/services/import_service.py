"""Service for saved object import."""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from saved_objects.config.settings import Settings
from saved_objects.db.database import Database
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.exceptions import InvalidRequestError
from saved_objects.models.export_import import (
    BatchResult,
    CopiedAs,
    Created,
    Failed,
    ImportErrorDetail,
    ImportOptions,
    ImportOutcome,
    ImportResult,
    Overwritten,
)
from saved_objects.models.saved_object import ObjectIdentity, SavedObject, SavedObjectReference
from saved_objects.utils.validators import validate_import_file, validate_import_flags

logger = logging.getLogger(__name__)


@dataclass
class ParsedRecord:
    """One non-blank line of an import stream."""

    line_number: int
    obj: SavedObject | None = None
    raw: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


class ImportService:
    """Service for importing an NDJSON record stream into the store.

    Malformed lines are isolated: each one becomes a `malformed_record`
    error for that line and the remaining records are still processed.
    """

    def __init__(
        self,
        repository: SavedObjectRepository,
        db: Database,
        settings: Settings,
    ) -> None:
        """Initialize import service.

        Args:
            repository: Saved object repository
            db: Database instance (for the import transaction)
            settings: Application settings
        """
        self.repository = repository
        self.db = db
        self.settings = settings

    async def import_file(
        self,
        content: str | bytes,
        filename: str | None,
        content_type: str | None = None,
        overwrite: bool = False,
        create_new_copies: bool = False,
    ) -> ImportResult:
        """Validate an upload and import its records.

        Request validation runs before the content is parsed.

        Args:
            content: File content (NDJSON)
            filename: Uploaded file name
            content_type: Declared content type, if any
            overwrite: Replace existing objects with the same identity
            create_new_copies: Import every object under a new id

        Returns:
            ImportResult

        Raises:
            InvalidRequestError: If flags are combined, the content is not UTF-8,
                or the stream holds too many records
            InvalidFileTypeError: If the upload extension or content type is rejected
        """
        validate_import_flags(overwrite, create_new_copies)
        validate_import_file(filename, content_type, self.settings)

        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidRequestError(f"Import file is not valid UTF-8: {e}") from e

        options = ImportOptions(overwrite=overwrite, create_new_copies=create_new_copies)
        return await self.import_ndjson(content, options)

    async def import_ndjson(self, content: str, options: ImportOptions) -> ImportResult:
        """Import an NDJSON stream.

        Args:
            content: NDJSON text
            options: Import flags

        Returns:
            ImportResult
        """
        validate_import_flags(options.overwrite, options.create_new_copies)

        records = self.parse_records(content)
        if len(records) > self.settings.import_max_objects:
            raise InvalidRequestError(
                f"Can't import more than {self.settings.import_max_objects} objects "
                f"({len(records)} found)"
            )

        async with self.db.transaction():
            batch = await self._process_records(records, options)

        result = batch.to_import_result()
        logger.info(
            "Imported %d saved objects (%d errors, overwrite=%s, createNewCopies=%s)",
            result.success_count,
            len(result.errors),
            options.overwrite,
            options.create_new_copies,
        )
        return result

    def parse_records(self, content: str) -> list[ParsedRecord]:
        """Parse NDJSON content line by line.

        Blank lines and the export details record are skipped.

        Args:
            content: NDJSON text

        Returns:
            Parsed records in source order
        """
        records: list[ParsedRecord] = []

        for line_number, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue

            try:
                raw = json.loads(line)
            except json.JSONDecodeError as e:
                records.append(ParsedRecord(line_number=line_number, error=f"Invalid JSON: {e}"))
                continue

            if not isinstance(raw, dict):
                records.append(
                    ParsedRecord(line_number=line_number, error="Record must be a JSON object")
                )
                continue

            if self._is_export_details(raw):
                continue

            try:
                obj = SavedObject.model_validate(raw)
            except ValidationError as e:
                records.append(
                    ParsedRecord(
                        line_number=line_number,
                        raw=raw,
                        error=f"Invalid saved object: {e.errors()[0]['msg']}",
                    )
                )
                continue

            if "id" not in raw:
                records.append(
                    ParsedRecord(line_number=line_number, raw=raw, error="Record has no id")
                )
                continue

            records.append(ParsedRecord(line_number=line_number, obj=obj, raw=raw))

        return records

    async def _process_records(
        self, records: list[ParsedRecord], options: ImportOptions
    ) -> BatchResult:
        """Run every record through the conflict policy in source order."""
        batch = BatchResult()

        destinations: dict[int, str] = {}
        id_map: dict[tuple[str, str], str] = {}
        if options.create_new_copies:
            # Only records that will actually be written get a destination id
            copyable = await self._resolve_copies(records)
            for record in records:
                if record.line_number not in copyable:
                    continue
                destinations[record.line_number] = str(uuid.uuid4())
                id_map.setdefault(record.obj.key, destinations[record.line_number])

        for record in records:
            outcome = await self._process_record(record, options, destinations, id_map)
            if isinstance(outcome, Failed):
                logger.debug(
                    "Import of %s/%s failed: %s", outcome.type, outcome.id, outcome.error.type
                )
            batch.outcomes.append(outcome)

        return batch

    async def _resolve_copies(self, records: list[ParsedRecord]) -> set[int]:
        """Return the lines whose references can all be satisfied.

        A reference is satisfied by another copyable record in the batch or by
        an object already in the store. Dropping a record can leave records
        that point at it unsatisfied, so this repeats until nothing changes.
        """
        candidates = {
            record.line_number: record.obj
            for record in records
            if record.obj is not None and self._is_supported(record.obj.type)
        }
        stored: dict[tuple[str, str], bool] = {}

        while True:
            batch_keys = {obj.key for obj in candidates.values()}
            dropped: set[int] = set()
            for line_number, obj in candidates.items():
                for ref in obj.references:
                    if ref.key in batch_keys:
                        continue
                    if ref.key not in stored:
                        stored[ref.key] = await self.repository.exists(ref.type, ref.id)
                    if not stored[ref.key]:
                        dropped.add(line_number)
                        break

            if not dropped:
                return set(candidates)
            for line_number in dropped:
                del candidates[line_number]

    async def _process_record(
        self,
        record: ParsedRecord,
        options: ImportOptions,
        destinations: dict[int, str],
        id_map: dict[tuple[str, str], str],
    ) -> ImportOutcome:
        obj = record.obj
        if obj is None:
            raw_type = record.raw.get("type")
            raw_id = record.raw.get("id")
            return Failed(
                type=raw_type if isinstance(raw_type, str) and raw_type else "unknown",
                id=raw_id if isinstance(raw_id, str) and raw_id else f"line-{record.line_number}",
                error=ImportErrorDetail(type="malformed_record", message=record.error),
            )

        if not self._is_supported(obj.type):
            return Failed(
                type=obj.type,
                id=obj.id,
                title=obj.title,
                error=ImportErrorDetail(
                    type="unsupported_type",
                    message=f"Unsupported saved object type: {obj.type}",
                ),
            )

        if options.create_new_copies:
            return await self._create_copy(obj, destinations.get(record.line_number), id_map)

        if not await self.repository.exists(obj.type, obj.id):
            await self.repository.create(obj)
            return Created(type=obj.type, id=obj.id, title=obj.title)

        if options.overwrite:
            await self.repository.upsert(obj)
            return Overwritten(type=obj.type, id=obj.id, title=obj.title)

        return Failed(
            type=obj.type,
            id=obj.id,
            title=obj.title,
            error=ImportErrorDetail(type="conflict"),
        )

    async def _create_copy(
        self,
        obj: SavedObject,
        destination_id: str | None,
        id_map: dict[tuple[str, str], str],
    ) -> ImportOutcome:
        references: list[SavedObjectReference] = []
        missing: list[ObjectIdentity] = []

        for ref in obj.references:
            if ref.key in id_map:
                references.append(ref.model_copy(update={"id": id_map[ref.key]}))
            elif await self.repository.exists(ref.type, ref.id):
                references.append(ref)
            else:
                missing.append(ObjectIdentity(type=ref.type, id=ref.id))

        if missing or destination_id is None:
            return Failed(
                type=obj.type,
                id=obj.id,
                title=obj.title,
                error=ImportErrorDetail(type="missing_references", references=missing),
            )

        copy = SavedObject(
            type=obj.type,
            id=destination_id,
            attributes=obj.attributes,
            references=references,
        )
        await self.repository.create(copy)

        return CopiedAs(
            type=obj.type,
            id=obj.id,
            destination_id=destination_id,
            title=obj.title,
        )

    def _is_supported(self, object_type: str) -> bool:
        return object_type in self.settings.supported_types

    @staticmethod
    def _is_export_details(raw: dict[str, Any]) -> bool:
        return "exportedCount" in raw and "type" not in raw

