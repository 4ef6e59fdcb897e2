"""Service for single saved object operations."""

import logging

from saved_objects.config.settings import Settings
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.exceptions import ConflictError, InvalidRequestError, ObjectNotFoundError
from saved_objects.models.saved_object import FindResult, SavedObject, SavedObjectCreate
from saved_objects.utils.validators import validate_pagination, validate_types

logger = logging.getLogger(__name__)


class SavedObjectService:
    """Service for get/create/delete/find of saved objects."""

    def __init__(self, repository: SavedObjectRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def get(self, object_type: str, object_id: str) -> SavedObject:
        """Get a saved object by identity.

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        obj = await self.repository.find(object_type, object_id)
        if obj is None:
            raise ObjectNotFoundError(object_type, object_id)
        return obj

    async def create(
        self,
        object_type: str,
        object_id: str | None,
        body: SavedObjectCreate,
        overwrite: bool = False,
    ) -> SavedObject:
        """Create a saved object.

        Args:
            object_type: Saved object type
            object_id: Saved object ID (generated when None)
            body: Attributes and references
            overwrite: Replace an existing object with the same identity

        Returns:
            The stored saved object

        Raises:
            InvalidRequestError: If the type is not supported
            ConflictError: If the identity exists and overwrite is False
        """
        validate_types([object_type], self.settings.supported_types, "create")

        obj = SavedObject(
            type=object_type,
            attributes=body.attributes,
            references=body.references,
            **({"id": object_id} if object_id else {}),
        )

        async with self.repository.db.transaction():
            if await self.repository.exists(obj.type, obj.id):
                if not overwrite:
                    raise ConflictError(obj.type, obj.id)
                stored = await self.repository.upsert(obj)
            else:
                stored = await self.repository.create(obj)

        logger.info("Saved object %s/%s stored (overwrite=%s)", obj.type, obj.id, overwrite)
        return stored

    async def delete(self, object_type: str, object_id: str) -> None:
        """Delete a saved object.

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        deleted = await self.repository.delete(object_type, object_id)
        if not deleted:
            raise ObjectNotFoundError(object_type, object_id)
        logger.info("Saved object %s/%s deleted", object_type, object_id)

    async def find(
        self,
        types: list[str] | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int | None = None,
    ) -> FindResult:
        """Find saved objects by type and title search.

        Args:
            types: Types to include (all supported types when None or empty)
            search: Case-insensitive title substring; a trailing `*` is ignored
            page: 1-based page number
            per_page: Page size (settings default when None)

        Returns:
            FindResult page

        Raises:
            InvalidRequestError: If a type is unsupported or pagination is invalid
        """
        if per_page is None:
            per_page = self.settings.find_default_per_page
        validate_pagination(page, per_page, self.settings.find_max_per_page)

        if types:
            types = validate_types(types, self.settings.supported_types, "find")
        else:
            types = list(self.settings.supported_types)

        if search is not None:
            search = search.strip().rstrip("*").strip()
            if len(search) > 1024:
                raise InvalidRequestError("search must be at most 1024 characters")

        objects, total = await self.repository.search(
            types=types,
            search=search or None,
            page=page,
            per_page=per_page,
        )
        return FindResult(page=page, per_page=per_page, total=total, saved_objects=objects)
