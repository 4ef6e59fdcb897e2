"""Pytest configuration and fixtures for saved objects tests."""

import json
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from saved_objects.config.settings import Settings
from saved_objects.db.database import Database
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.models.saved_object import SavedObject, SavedObjectReference
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.services.saved_object_service import SavedObjectService

INDEX_PATTERN_ID = "test-index-pattern-id"
VISUALIZATION_ID = "test-visualization-id"
DASHBOARD_ID = "test-dashboard-id"


def sample_objects() -> list[SavedObject]:
    """Index pattern <- visualization <- dashboard."""
    return [
        SavedObject(
            type="index-pattern",
            id=INDEX_PATTERN_ID,
            attributes={"title": "test-index-*", "timeFieldName": "timestamp"},
        ),
        SavedObject(
            type="visualization",
            id=VISUALIZATION_ID,
            attributes={"title": "Test Visualization", "visState": "{}"},
            references=[
                SavedObjectReference(
                    name="kibanaSavedObjectMeta.searchSourceJSON.index",
                    type="index-pattern",
                    id=INDEX_PATTERN_ID,
                )
            ],
        ),
        SavedObject(
            type="dashboard",
            id=DASHBOARD_ID,
            attributes={"title": "Test Dashboard", "panelsJSON": "[]"},
            references=[
                SavedObjectReference(name="panel_0", type="visualization", id=VISUALIZATION_ID)
            ],
        ),
    ]


def to_ndjson(objects: list[SavedObject]) -> str:
    return "".join(json.dumps(obj.to_record()) + "\n" for obj in objects)


def parse_ndjson(content: str) -> list[dict]:
    return [json.loads(line) for line in content.split("\n") if line.strip()]


@pytest.fixture
def test_settings() -> Settings:
    """Test configuration settings."""
    return Settings(
        database_path=":memory:",
        log_level="DEBUG",
        import_max_objects=100,
        export_max_size=100,
    )


@pytest.fixture
def fixture_ndjson() -> str:
    """Three-object import file content."""
    return to_ndjson(sample_objects())


@pytest_asyncio.fixture
async def memory_db() -> AsyncIterator[Database]:
    """In-memory database for fast tests."""
    db = Database(database_path=":memory:")
    await db.connect()
    await db.migrate()

    yield db

    await db.close()


@pytest_asyncio.fixture
async def repository(memory_db: Database) -> SavedObjectRepository:
    """Saved object repository."""
    return SavedObjectRepository(db=memory_db)


@pytest_asyncio.fixture
async def saved_object_service(
    repository: SavedObjectRepository, test_settings: Settings
) -> SavedObjectService:
    """Saved object service."""
    return SavedObjectService(repository=repository, settings=test_settings)


@pytest_asyncio.fixture
async def export_service(
    repository: SavedObjectRepository, test_settings: Settings
) -> ExportService:
    """Export service."""
    return ExportService(repository=repository, settings=test_settings)


@pytest_asyncio.fixture
async def import_service(
    repository: SavedObjectRepository, memory_db: Database, test_settings: Settings
) -> ImportService:
    """Import service."""
    return ImportService(repository=repository, db=memory_db, settings=test_settings)


@pytest_asyncio.fixture
async def seeded_repository(repository: SavedObjectRepository) -> SavedObjectRepository:
    """Repository holding the three sample objects."""
    for obj in sample_objects():
        await repository.create(obj)
    return repository
