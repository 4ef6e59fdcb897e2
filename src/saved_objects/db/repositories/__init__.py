"""Repository modules for data access."""

from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository

__all__ = ["SavedObjectRepository"]
