"""Saved object repository for database operations."""

import json
from datetime import datetime, timezone
from typing import Any

from saved_objects.db.database import Database
from saved_objects.models.saved_object import SavedObject, SavedObjectReference


class SavedObjectRepository:
    """Repository for saved object operations."""

    def __init__(self, db: Database) -> None:
        """Initialize repository.

        Args:
            db: Database instance
        """
        self.db = db

    async def create(self, obj: SavedObject) -> SavedObject:
        """Insert a new saved object.

        Args:
            obj: Saved object to create

        Returns:
            Created saved object with updated_at set

        Raises:
            aiosqlite.IntegrityError: If the (type, id) pair already exists
        """
        now = datetime.now(timezone.utc)
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO saved_objects (type, id, attributes, refs, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    obj.type,
                    obj.id,
                    json.dumps(obj.attributes),
                    self._dump_references(obj.references),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        return obj.model_copy(update={"updated_at": now})

    async def upsert(self, obj: SavedObject) -> SavedObject:
        """Create or replace a saved object, keeping its original created_at.

        Args:
            obj: Saved object to write

        Returns:
            Written saved object with updated_at set
        """
        now = datetime.now(timezone.utc)
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO saved_objects (type, id, attributes, refs, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(type, id) DO UPDATE SET
                    attributes = excluded.attributes,
                    refs = excluded.refs,
                    updated_at = excluded.updated_at
                """,
                (
                    obj.type,
                    obj.id,
                    json.dumps(obj.attributes),
                    self._dump_references(obj.references),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        return obj.model_copy(update={"updated_at": now})

    async def find(self, object_type: str, object_id: str) -> SavedObject | None:
        """Find a saved object by identity.

        Args:
            object_type: Saved object type
            object_id: Saved object ID

        Returns:
            SavedObject or None if not found
        """
        cursor = await self.db.execute(
            "SELECT * FROM saved_objects WHERE type = ? AND id = ?",
            (object_type, object_id),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return self._row_to_saved_object(row)

    async def exists(self, object_type: str, object_id: str) -> bool:
        """Check whether a saved object exists."""
        cursor = await self.db.execute(
            "SELECT 1 FROM saved_objects WHERE type = ? AND id = ?",
            (object_type, object_id),
        )
        return await cursor.fetchone() is not None

    async def find_many(
        self, keys: list[tuple[str, str]]
    ) -> dict[tuple[str, str], SavedObject]:
        """Find several saved objects by identity.

        Args:
            keys: (type, id) pairs

        Returns:
            Mapping of found identities to objects; missing keys are absent
        """
        found: dict[tuple[str, str], SavedObject] = {}
        for object_type, object_id in dict.fromkeys(keys):
            obj = await self.find(object_type, object_id)
            if obj:
                found[obj.key] = obj
        return found

    async def find_by_types(self, types: list[str], limit: int | None = None) -> list[SavedObject]:
        """Find all saved objects of the given types.

        Objects are grouped by type in the order given, ids ascending.

        Args:
            types: Saved object types
            limit: Maximum objects to return per call

        Returns:
            List of saved objects
        """
        objects: list[SavedObject] = []
        for object_type in dict.fromkeys(types):
            cursor = await self.db.execute(
                "SELECT * FROM saved_objects WHERE type = ? ORDER BY id",
                (object_type,),
            )
            rows = await cursor.fetchall()
            objects.extend(self._row_to_saved_object(row) for row in rows)
            if limit is not None and len(objects) >= limit:
                return objects[:limit]
        return objects

    async def count_by_types(self, types: list[str]) -> int:
        """Count saved objects of the given types."""
        if not types:
            return 0

        placeholders = ",".join("?" * len(types))
        cursor = await self.db.execute(
            f"SELECT COUNT(*) FROM saved_objects WHERE type IN ({placeholders})",
            tuple(types),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def search(
        self,
        types: list[str],
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[SavedObject], int]:
        """Search saved objects by type and title substring.

        Args:
            types: Saved object types to include
            search: Case-insensitive substring matched against attributes.title
            page: 1-based page number
            per_page: Page size

        Returns:
            Tuple of (page of saved objects, total matching count)
        """
        if not types:
            return [], 0

        placeholders = ",".join("?" * len(types))
        where_clauses = [f"type IN ({placeholders})"]
        params: list[Any] = list(types)

        if search:
            escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            where_clauses.append(
                "LOWER(json_extract(attributes, '$.title')) LIKE ? ESCAPE '\\'"
            )
            params.append(f"%{escaped.lower()}%")

        where_sql = " WHERE " + " AND ".join(where_clauses)

        cursor = await self.db.execute(
            f"SELECT COUNT(*) FROM saved_objects{where_sql}", tuple(params)
        )
        row = await cursor.fetchone()
        total = row[0] if row else 0

        cursor = await self.db.execute(
            f"SELECT * FROM saved_objects{where_sql} ORDER BY type, id LIMIT ? OFFSET ?",
            tuple(params + [per_page, (page - 1) * per_page]),
        )
        rows = await cursor.fetchall()

        return [self._row_to_saved_object(r) for r in rows], total

    async def delete(self, object_type: str, object_id: str) -> bool:
        """Delete a saved object.

        Args:
            object_type: Saved object type
            object_id: Saved object ID

        Returns:
            True if a row was deleted
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                "DELETE FROM saved_objects WHERE type = ? AND id = ?",
                (object_type, object_id),
            )
        return cursor.rowcount > 0

    def _dump_references(self, references: list[SavedObjectReference]) -> str:
        return json.dumps([ref.model_dump() for ref in references])

    def _row_to_saved_object(self, row: Any) -> SavedObject:
        """Convert database row to SavedObject.

        Args:
            row: Database row

        Returns:
            SavedObject
        """
        return SavedObject(
            type=row["type"],
            id=row["id"],
            attributes=json.loads(row["attributes"]) if row["attributes"] else {},
            references=[
                SavedObjectReference(**ref) for ref in json.loads(row["refs"] or "[]")
            ],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
