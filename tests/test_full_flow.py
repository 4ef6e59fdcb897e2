"""End-to-end export/import round trip through the services."""

import pytest

from conftest import DASHBOARD_ID, VISUALIZATION_ID, parse_ndjson
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.models.export_import import ExportRequest, ImportOptions
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService


@pytest.mark.asyncio
async def test_export_then_reimport_with_each_mode(
    export_service: ExportService,
    import_service: ImportService,
    seeded_repository: SavedObjectRepository,
) -> None:
    """Export two objects, then import fresh, again without overwrite, then as copies."""
    # Given: an export of a dashboard and a visualization without references
    content = await export_service.export_ndjson(
        ExportRequest(
            objects=[
                {"type": "dashboard", "id": DASHBOARD_ID},
                {"type": "visualization", "id": VISUALIZATION_ID},
            ],
            include_references_deep=False,
        )
    )
    records = parse_ndjson(content)
    assert len(records) == 3
    assert records[-1]["exportedCount"] == 2

    # When: the exported objects are removed and the stream imported fresh
    await seeded_repository.delete("dashboard", DASHBOARD_ID)
    await seeded_repository.delete("visualization", VISUALIZATION_ID)
    fresh = await import_service.import_ndjson(content, ImportOptions())

    # Then: both objects are created
    assert fresh.success is True
    assert fresh.success_count == 2

    # When: the same stream is imported again without overwrite
    again = await import_service.import_ndjson(content, ImportOptions(overwrite=False))

    # Then: every object conflicts
    assert again.success is False
    assert len(again.errors) == 2
    assert all(error.error.type == "conflict" for error in again.errors)

    # When: imported as new copies
    copies = await import_service.import_ndjson(content, ImportOptions(create_new_copies=True))

    # Then: two new objects with fresh ids
    assert copies.success is True
    assert copies.success_count == 2
    assert all(r.destination_id != r.id for r in copies.success_results)
    assert await seeded_repository.count_by_types(["dashboard", "visualization"]) == 4


@pytest.mark.asyncio
async def test_deep_export_round_trips_into_empty_store(
    export_service: ExportService,
    import_service: ImportService,
    seeded_repository: SavedObjectRepository,
) -> None:
    """A deep export carries everything needed to rebuild the graph elsewhere."""
    content = await export_service.export_ndjson(
        ExportRequest(type="dashboard", include_references_deep=True)
    )

    for record in parse_ndjson(content)[:-1]:
        await seeded_repository.delete(record["type"], record["id"])

    result = await import_service.import_ndjson(content, ImportOptions(create_new_copies=True))

    assert result.success is True
    assert result.success_count == 3
