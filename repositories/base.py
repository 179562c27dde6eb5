"""
Base repository for the data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo.collection import Collection

from app.exceptions import ServiceValidationError

_OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")

SortSpec = Sequence[Tuple[str, int]]


def parse_object_id(value: Any, label: str = "ID") -> ObjectId:
    """Validate a client supplied identifier before it reaches the store.

    Raises:
        ServiceValidationError: ``value`` is not a 24 character hex string
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not _OBJECT_ID_RE.fullmatch(value):
        raise ServiceValidationError(f"Invalid {label}", details={"value": str(value)})
    return ObjectId(value)


def contains_pattern(text: str) -> Dict[str, str]:
    """Case-insensitive substring match; user input is escaped, never a raw regex."""
    return {"$regex": re.escape(text), "$options": "i"}


class BaseRepository:
    """
    Base repository providing common operations over one collection.
    All repositories should inherit from this class.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def get_by_id(self, entity_id: ObjectId) -> Optional[dict]:
        """Get document by _id"""
        return self.collection.find_one({"_id": entity_id})

    def exists(self, entity_id: ObjectId) -> bool:
        """Check if document exists"""
        return self.collection.count_documents({"_id": entity_id}, limit=1) > 0

    def count(self, query: Optional[Mapping[str, Any]] = None) -> int:
        return self.collection.count_documents(dict(query or {}))

    def find_page(
        self,
        query: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> List[dict]:
        """Filtered find with optional sort and skip/limit pagination"""
        cursor = self.collection.find(
            dict(query or {}),
            projection,
            sort=list(sort) if sort else None,
            skip=skip,
            limit=limit,
        )
        return list(cursor)

    def insert(self, document: dict) -> ObjectId:
        """Insert document and return its generated id"""
        return self.collection.insert_one(document).inserted_id

    def delete_by_id(self, entity_id: ObjectId) -> bool:
        """Delete document by _id"""
        return self.collection.delete_one({"_id": entity_id}).deleted_count > 0

    def aggregate(self, pipeline: List[dict]) -> List[dict]:
        return list(self.collection.aggregate(pipeline))

    def joined_page(
        self,
        match: Mapping[str, Any],
        project: Mapping[str, Any],
        sort: Mapping[str, int],
        skip: int,
        limit: int,
        from_collection: str = "meals",
        local_field: str = "mealId",
    ) -> List[dict]:
        """match -> lookup parent meal -> unwind -> project -> sort -> skip/limit.

        Documents whose parent no longer exists are dropped by the unwind.
        """
        pipeline = [
            {"$match": dict(match)},
            {
                "$lookup": {
                    "from": from_collection,
                    "localField": local_field,
                    "foreignField": "_id",
                    "as": "meal",
                }
            },
            {"$unwind": "$meal"},
            {"$project": dict(project)},
            {"$sort": dict(sort)},
            {"$skip": skip},
            {"$limit": limit},
        ]
        return self.aggregate(pipeline)
