"""Tests for saved object export."""

import json

import pytest

from conftest import DASHBOARD_ID, INDEX_PATTERN_ID, VISUALIZATION_ID, parse_ndjson
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.exceptions import InvalidRequestError, ObjectNotFoundError
from saved_objects.models.export_import import ExportRequest
from saved_objects.models.saved_object import SavedObject, SavedObjectReference
from saved_objects.services.export_service import ExportService


def ref(object_type: str, object_id: str) -> SavedObjectReference:
    return SavedObjectReference(name=f"ref_{object_id}", type=object_type, id=object_id)


class TestExportSelection:
    """Selection modes and request validation."""

    @pytest.mark.asyncio
    async def test_export_by_type(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(
            ExportRequest(type=["dashboard", "visualization"])
        )

        assert [obj.key for obj in result.objects] == [
            ("dashboard", DASHBOARD_ID),
            ("visualization", VISUALIZATION_ID),
        ]
        assert result.details.exported_count == 2

    @pytest.mark.asyncio
    async def test_export_by_single_type_string(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(ExportRequest(type="index-pattern"))

        assert [obj.id for obj in result.objects] == [INDEX_PATTERN_ID]

    @pytest.mark.asyncio
    async def test_export_by_objects_keeps_selection_order(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(
            ExportRequest(
                objects=[
                    {"type": "visualization", "id": VISUALIZATION_ID},
                    {"type": "dashboard", "id": DASHBOARD_ID},
                ]
            )
        )

        assert [obj.type for obj in result.objects] == ["visualization", "dashboard"]

    @pytest.mark.asyncio
    async def test_both_selection_modes_rejected(self, export_service: ExportService):
        with pytest.raises(InvalidRequestError):
            await export_service.export_records(
                ExportRequest(type="dashboard", objects=[{"type": "dashboard", "id": "d"}])
            )

    @pytest.mark.asyncio
    async def test_no_selection_rejected(self, export_service: ExportService):
        with pytest.raises(InvalidRequestError):
            await export_service.export_records(ExportRequest())

    @pytest.mark.asyncio
    async def test_unsupported_type_rejected(self, export_service: ExportService):
        with pytest.raises(InvalidRequestError, match="non-exportable"):
            await export_service.export_records(ExportRequest(type="secret-type"))

    @pytest.mark.asyncio
    async def test_missing_selection_does_not_abort(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(
            ExportRequest(
                objects=[
                    {"type": "dashboard", "id": DASHBOARD_ID},
                    {"type": "dashboard", "id": "missing-dashboard"},
                ]
            )
        )

        assert [obj.id for obj in result.objects] == [DASHBOARD_ID]
        assert [m.id for m in result.details.missing_objects] == ["missing-dashboard"]

    @pytest.mark.asyncio
    async def test_all_selections_missing_raises(self, export_service: ExportService):
        with pytest.raises(ObjectNotFoundError):
            await export_service.export_records(
                ExportRequest(objects=[{"type": "dashboard", "id": "nope"}])
            )

    @pytest.mark.asyncio
    async def test_export_size_limit(
        self, export_service: ExportService, repository: SavedObjectRepository
    ):
        export_service.settings = export_service.settings.model_copy(
            update={"export_max_size": 2}
        )
        for i in range(3):
            await repository.create(SavedObject(type="search", id=f"s{i}"))

        with pytest.raises(InvalidRequestError, match="more than 2"):
            await export_service.export_records(ExportRequest(type="search"))


class TestReferenceExpansion:
    """includeReferencesDeep behaviour."""

    @pytest.mark.asyncio
    async def test_shallow_export_yields_exact_selection(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(
            ExportRequest(objects=[{"type": "dashboard", "id": DASHBOARD_ID}])
        )

        assert [obj.key for obj in result.objects] == [("dashboard", DASHBOARD_ID)]
        assert result.details.missing_references == []

    @pytest.mark.asyncio
    async def test_deep_export_follows_transitive_references(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        result = await export_service.export_records(
            ExportRequest(
                objects=[{"type": "dashboard", "id": DASHBOARD_ID}],
                include_references_deep=True,
            )
        )

        assert [obj.key for obj in result.objects] == [
            ("dashboard", DASHBOARD_ID),
            ("visualization", VISUALIZATION_ID),
            ("index-pattern", INDEX_PATTERN_ID),
        ]
        assert result.details.exported_count == 3

    @pytest.mark.asyncio
    async def test_deep_export_terminates_on_cycles(
        self, export_service: ExportService, repository: SavedObjectRepository
    ):
        await repository.create(SavedObject(type="dashboard", id="a", references=[ref("dashboard", "b")]))
        await repository.create(SavedObject(type="dashboard", id="b", references=[ref("dashboard", "a")]))
        await repository.create(
            SavedObject(type="dashboard", id="c", references=[ref("dashboard", "c")])
        )

        result = await export_service.export_records(
            ExportRequest(type="dashboard", include_references_deep=True)
        )

        assert sorted(obj.id for obj in result.objects) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_shared_reference_emitted_once(
        self, export_service: ExportService, repository: SavedObjectRepository
    ):
        await repository.create(SavedObject(type="index-pattern", id="ip"))
        await repository.create(
            SavedObject(type="visualization", id="v1", references=[ref("index-pattern", "ip")])
        )
        await repository.create(
            SavedObject(type="visualization", id="v2", references=[ref("index-pattern", "ip")])
        )
        await repository.create(
            SavedObject(
                type="dashboard",
                id="d",
                references=[ref("visualization", "v1"), ref("visualization", "v2")],
            )
        )

        result = await export_service.export_records(
            ExportRequest(objects=[{"type": "dashboard", "id": "d"}], include_references_deep=True)
        )

        keys = [obj.key for obj in result.objects]
        assert keys == [
            ("dashboard", "d"),
            ("visualization", "v1"),
            ("visualization", "v2"),
            ("index-pattern", "ip"),
        ]
        assert len(keys) == len(set(keys))

    @pytest.mark.asyncio
    async def test_missing_references_recorded(
        self, export_service: ExportService, repository: SavedObjectRepository
    ):
        await repository.create(
            SavedObject(
                type="visualization",
                id="v",
                references=[ref("index-pattern", "gone"), ref("search", "gone-too")],
            )
        )
        await repository.create(
            SavedObject(type="dashboard", id="d", references=[ref("index-pattern", "gone")])
        )

        result = await export_service.export_records(
            ExportRequest(type=["visualization", "dashboard"], include_references_deep=True)
        )

        assert result.details.exported_count == 2
        assert result.details.missing_ref_count == 2
        assert [(m.type, m.id) for m in result.details.missing_references] == [
            ("index-pattern", "gone"),
            ("search", "gone-too"),
        ]


class TestNdjsonOutput:
    """Serialized record stream."""

    @pytest.mark.asyncio
    async def test_summary_is_last_line(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        content = await export_service.export_ndjson(
            ExportRequest(type="dashboard", include_references_deep=True)
        )

        records = parse_ndjson(content)
        assert len(records) == 4
        assert records[-1]["exportedCount"] == 3
        assert records[-1]["missingRefCount"] == 0
        assert all("type" in record for record in records[:-1])

    @pytest.mark.asyncio
    async def test_exclude_export_details(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        content = await export_service.export_ndjson(
            ExportRequest(type=["dashboard", "visualization"], exclude_export_details=True)
        )

        records = parse_ndjson(content)
        assert len(records) == 2
        assert all("exportedCount" not in record for record in records)

    @pytest.mark.asyncio
    async def test_each_line_parses_independently(
        self, export_service: ExportService, seeded_repository: SavedObjectRepository
    ):
        content = await export_service.export_ndjson(ExportRequest(type="visualization"))

        lines = content.splitlines()
        assert content.endswith("\n")
        for line in lines:
            assert isinstance(json.loads(line), dict)
