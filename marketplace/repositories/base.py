"""
Base repository: thin CRUD wrapper over a single Motor collection.
"""
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..core.exceptions import RepositoryError
from ..models.base import utcnow
from ..utils.serializers import to_object_id

logger = logging.getLogger(__name__)

SortSpec = Union[str, Sequence[Tuple[str, int]]]
DEFAULT_SORT: List[Tuple[str, int]] = [("created_at", -1)]


class BaseRepository:
    """
    CRUD operations shared by every collection.

    Subclasses set ``collection_name``. Lookups by a malformed id return None
    rather than raising; driver failures surface as RepositoryError.
    """

    collection_name: str = ""

    def __init__(self, db: AsyncIOMotorDatabase):
        if not self.collection_name:
            raise ValueError("collection_name is required for repository")
        self.db = db
        self.collection: AsyncIOMotorCollection = db[self.collection_name]

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a document and return it with its new ``_id``.

        Args:
            data: Document to insert

        Returns:
            Inserted document
        """
        document = dict(data)
        document.setdefault("created_at", utcnow())
        document.setdefault("updated_at", document["created_at"])
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            raise RepositoryError(f"Error creating document: {e}") from e
        document["_id"] = result.inserted_id
        return document

    async def create_many(self, data: List[Dict[str, Any]]) -> List[ObjectId]:
        try:
            result = await self.collection.insert_many([dict(d) for d in data])
        except PyMongoError as e:
            raise RepositoryError(f"Error creating multiple documents: {e}") from e
        return list(result.inserted_ids)

    async def find_by_id(self, id: Any, projection: Optional[Mapping[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Find a document by ID.

        Returns:
            The document, or None when missing or when ``id`` is not a valid ObjectId
        """
        object_id = to_object_id(id)
        if object_id is None:
            return None
        try:
            return await self.collection.find_one({"_id": object_id}, projection)
        except PyMongoError as e:
            raise RepositoryError(f"Error finding document by ID: {e}") from e

    async def find_by_field(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        return await self.find_one({field: value})

    async def find_one(self, filter: Mapping[str, Any], projection: Optional[Mapping[str, Any]] = None) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one(filter, projection)
        except PyMongoError as e:
            raise RepositoryError(f"Error finding document: {e}") from e

    async def find_all(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
        skip: int = 0,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Find documents with optional sorting and pagination.

        Args:
            filter: Filter criteria
            sort: Sort spec, newest first by default
            limit: Page size; None returns everything
            skip: Number of documents to skip
            projection: Fields to include or exclude

        Returns:
            ``{"data": [...], "pagination": {"total", "page", "limit", "pages"}}``
        """
        filter = dict(filter or {})
        try:
            cursor = self.collection.find(filter, projection).sort(sort or DEFAULT_SORT)
            if limit:
                cursor = cursor.skip(skip).limit(limit)
            documents = await cursor.to_list(length=limit)
            total = await self.collection.count_documents(filter)
        except PyMongoError as e:
            raise RepositoryError(f"Error finding documents: {e}") from e

        page_size = limit or total
        return {
            "data": documents,
            "pagination": {
                "total": total,
                "page": (skip // page_size) + 1 if page_size else 1,
                "limit": page_size,
                "pages": math.ceil(total / limit) if limit else 1,
            },
        }

    async def update_by_id(self, id: Any, update: Dict[str, Any], raw: bool = False) -> Optional[Dict[str, Any]]:
        """
        Update a document by ID and return the updated version.

        Args:
            id: Document ID
            update: Field values to ``$set``, or a full update document when ``raw`` is True
            raw: Pass ``update`` through untouched (for ``$push``/``$inc`` etc.)

        Returns:
            Updated document, or None when missing or ``id`` is invalid
        """
        object_id = to_object_id(id)
        if object_id is None:
            return None

        if raw:
            update_doc = dict(update)
            update_doc.setdefault("$set", {})
            update_doc["$set"] = {**update_doc["$set"], "updated_at": utcnow()}
        else:
            update_doc = {"$set": {**update, "updated_at": utcnow()}}

        try:
            return await self.collection.find_one_and_update(
                {"_id": object_id},
                update_doc,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error updating document by ID: {e}") from e

    async def update_many(self, filter: Mapping[str, Any], update: Dict[str, Any]) -> int:
        try:
            result = await self.collection.update_many(filter, update)
        except PyMongoError as e:
            raise RepositoryError(f"Error updating multiple documents: {e}") from e
        return result.modified_count

    async def delete_by_id(self, id: Any) -> Optional[Dict[str, Any]]:
        object_id = to_object_id(id)
        if object_id is None:
            return None
        try:
            return await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            raise RepositoryError(f"Error deleting document by ID: {e}") from e

    async def delete_many(self, filter: Mapping[str, Any]) -> int:
        try:
            result = await self.collection.delete_many(filter)
        except PyMongoError as e:
            raise RepositoryError(f"Error deleting multiple documents: {e}") from e
        return result.deleted_count

    async def soft_delete(self, id: Any) -> Optional[Dict[str, Any]]:
        """Mark a document inactive instead of removing it."""
        return await self.update_by_id(id, {"is_active": False})

    async def restore(self, id: Any) -> Optional[Dict[str, Any]]:
        return await self.update_by_id(id, {"is_active": True})

    async def exists(self, filter: Mapping[str, Any]) -> bool:
        return await self.count(filter) > 0

    async def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        try:
            return await self.collection.count_documents(dict(filter or {}))
        except PyMongoError as e:
            raise RepositoryError(f"Error counting documents: {e}") from e

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.aggregate(pipeline)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise RepositoryError(f"Error aggregating documents: {e}") from e

    async def distinct(self, field: str, filter: Optional[Mapping[str, Any]] = None) -> List[Any]:
        try:
            return await self.collection.distinct(field, dict(filter or {}))
        except PyMongoError as e:
            raise RepositoryError(f"Error listing distinct values: {e}") from e
