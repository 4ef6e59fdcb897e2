"""Service for saved object export."""

import json
import logging
from collections import deque

from saved_objects.config.settings import Settings
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.exceptions import InvalidRequestError, ObjectNotFoundError
from saved_objects.models.export_import import ExportDetails, ExportRequest, ExportResult
from saved_objects.models.saved_object import ObjectIdentity, SavedObject
from saved_objects.utils.validators import validate_types

logger = logging.getLogger(__name__)


class ExportService:
    """Service for exporting saved objects to an NDJSON record stream."""

    def __init__(self, repository: SavedObjectRepository, settings: Settings) -> None:
        """Initialize export service.

        Args:
            repository: Saved object repository
            settings: Application settings
        """
        self.repository = repository
        self.settings = settings

    async def export_records(self, request: ExportRequest) -> ExportResult:
        """Resolve an export request into ordered objects and a summary.

        Selected objects come first in selection order, then (with
        include_references_deep) referenced objects in discovery order.

        Args:
            request: Export request

        Returns:
            ExportResult with objects and details

        Raises:
            InvalidRequestError: If the selection is missing, ambiguous or too large
            ObjectNotFoundError: If every explicitly selected object is missing
        """
        has_types = request.type is not None
        has_objects = request.objects is not None

        if has_types == has_objects:
            raise InvalidRequestError(
                "Either `type` or `objects` is required, but not both"
            )

        missing_objects: list[ObjectIdentity] = []

        if has_types:
            selected = await self._select_by_types(request.types or [])
        else:
            selected, missing_objects = await self._select_by_objects(request.objects or [])

        missing_references: list[ObjectIdentity] = []
        objects = selected
        if request.include_references_deep:
            objects, missing_references = await self._expand_references(selected)

        details = ExportDetails(
            exported_count=len(objects),
            missing_ref_count=len(missing_references),
            missing_references=missing_references,
            missing_objects=missing_objects,
        )

        logger.info(
            "Exported %d saved objects (%d missing references, %d missing objects)",
            details.exported_count,
            details.missing_ref_count,
            len(missing_objects),
        )

        return ExportResult(objects=objects, details=details)

    async def export_ndjson(self, request: ExportRequest) -> str:
        """Export to a newline-delimited JSON string.

        Each line is an independently parseable JSON document. The summary
        record is the last line unless exclude_export_details is set.

        Args:
            request: Export request

        Returns:
            NDJSON text ending with a newline
        """
        result = await self.export_records(request)

        lines = [json.dumps(obj.to_record()) for obj in result.objects]
        if not request.exclude_export_details:
            lines.append(json.dumps(result.details.to_record()))

        return "".join(line + "\n" for line in lines)

    async def _select_by_types(self, types: list[str]) -> list[SavedObject]:
        types = validate_types(types, self.settings.supported_types, "export")

        total = await self.repository.count_by_types(types)
        if total > self.settings.export_max_size:
            raise InvalidRequestError(
                f"Can't export more than {self.settings.export_max_size} objects "
                f"({total} matched)"
            )

        return await self.repository.find_by_types(types)

    async def _select_by_objects(
        self, identities: list[ObjectIdentity]
    ) -> tuple[list[SavedObject], list[ObjectIdentity]]:
        if not identities:
            raise InvalidRequestError("`objects` must contain at least one entry")

        validate_types(
            [identity.type for identity in identities],
            self.settings.supported_types,
            "export",
        )

        keys = list(dict.fromkeys(identity.key for identity in identities))
        found = await self.repository.find_many(keys)

        selected = [found[key] for key in keys if key in found]
        missing = [ObjectIdentity(type=t, id=i) for t, i in keys if (t, i) not in found]

        if not selected:
            first = missing[0]
            raise ObjectNotFoundError(
                first.type,
                first.id,
                message="None of the requested saved objects were found: "
                + ", ".join(f"{m.type}/{m.id}" for m in missing),
            )

        for identity in missing:
            logger.warning("Export selection not found: %s/%s", identity.type, identity.id)

        return selected, missing

    async def _expand_references(
        self, selected: list[SavedObject]
    ) -> tuple[list[SavedObject], list[ObjectIdentity]]:
        """Breadth-first closure over reference edges.

        Args:
            selected: Objects chosen by the request, already de-duplicated

        Returns:
            Tuple of (selection followed by discovered objects, missing references)
        """
        objects = list(selected)
        missing: list[ObjectIdentity] = []

        queue: deque[SavedObject] = deque(selected)
        visited: set[tuple[str, str]] = {obj.key for obj in selected}

        while queue:
            current = queue.popleft()

            for ref in current.references:
                # Skip if already visited (cycle detection)
                if ref.key in visited:
                    continue
                visited.add(ref.key)

                target = await self.repository.find(ref.type, ref.id)
                if target is None:
                    missing.append(ObjectIdentity(type=ref.type, id=ref.id))
                    continue

                objects.append(target)
                queue.append(target)

        return objects, missing
