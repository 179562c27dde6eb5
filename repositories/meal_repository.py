"""
Meal repositories - meals and upcoming meals share the like/actor-set shape.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from repositories.base import BaseRepository


class LikeableRepository(BaseRepository):
    """Documents carrying a ``likes`` counter and a ``likedBy`` actor set."""

    def add_like(self, entity_id: ObjectId, actor_email: str) -> Optional[dict]:
        """Add ``actor_email`` to the actor set and bump the counter, once per actor.

        The "not yet liked" check lives in the filter, so the check and the
        write are one atomic operation. Returns the updated document, or None
        when the document is missing or the actor already liked it.
        """
        return self.collection.find_one_and_update(
            {"_id": entity_id, "likedBy": {"$ne": actor_email}},
            {"$inc": {"likes": 1}, "$addToSet": {"likedBy": actor_email}},
            return_document=ReturnDocument.AFTER,
        )


class MealRepository(LikeableRepository):
    """Repository for published meals"""

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def update_fields(self, meal_id: ObjectId, fields: Dict[str, Any]) -> bool:
        """Returns False if no meal matched"""
        result = self.collection.update_one({"_id": meal_id}, {"$set": fields})
        return result.matched_count > 0

    def increment_review_count(self, meal_id: ObjectId) -> bool:
        result = self.collection.update_one({"_id": meal_id}, {"$inc": {"reviewCount": 1}})
        return result.modified_count > 0

    def decrement_review_count(self, meal_id: ObjectId) -> bool:
        """Decrement, never below zero. Returns False when nothing was decremented."""
        result = self.collection.update_one(
            {"_id": meal_id, "reviewCount": {"$gt": 0}},
            {"$inc": {"reviewCount": -1}},
        )
        return result.modified_count > 0

    def replace_review_count(self, meal_id: ObjectId, review_count: int) -> Optional[dict]:
        """Overwrite reviewCount and return the document as it was before"""
        return self.collection.find_one_and_update(
            {"_id": meal_id},
            {"$set": {"reviewCount": review_count}},
            return_document=ReturnDocument.BEFORE,
        )

    def count_by_creator(self, email: str) -> int:
        return self.count({"addedByEmail": email})

    def top_liked(self, limit: int = 5) -> List[dict]:
        return self.find_page(
            {}, sort=[("likes", -1)], limit=limit, projection={"title": 1, "likes": 1}
        )


class UpcomingMealRepository(LikeableRepository):
    """Repository for meals still collecting likes before publication"""

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def list_by_publish_date(self) -> List[dict]:
        return self.find_page({}, sort=[("publishDate", 1)])
