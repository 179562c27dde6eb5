"""
Meal Request Repository - links users to the meals they asked to be served
"""

from datetime import datetime
from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from repositories.base import BaseRepository, contains_pattern
from domain.enums import RequestStatus


class MealRequestRepository(BaseRepository):
    """Repository for meal requests. At most one request per (userEmail, mealId)."""

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def create_if_absent(
        self, meal_id: ObjectId, user_email: str, user_name: str, now: datetime
    ) -> Optional[ObjectId]:
        """Insert a pending request unless the pair already has one.

        Upsert with $setOnInsert against the unique (userEmail, mealId) index:
        returns the new id, or None if a request already existed.
        """
        try:
            result = self.collection.update_one(
                {"userEmail": user_email, "mealId": meal_id},
                {
                    "$setOnInsert": {
                        "userName": user_name,
                        "status": RequestStatus.PENDING.value,
                        "requestedAt": now,
                    }
                },
                upsert=True,
            )
        except DuplicateKeyError:
            return None
        return result.upserted_id

    def for_user(self, user_email: str, skip: int, limit: int) -> Tuple[List[dict], int]:
        match = {"userEmail": user_email}
        requests = self.joined_page(
            match,
            project={
                "_id": 1,
                "mealId": 1,
                "mealTitle": "$meal.title",
                "likes": "$meal.likes",
                "reviewCount": "$meal.reviewCount",
                "status": 1,
                "requestedAt": 1,
            },
            sort={"requestedAt": -1},
            skip=skip,
            limit=limit,
        )
        return requests, self.count(match)

    def for_serving(self, search: str, skip: int, limit: int) -> Tuple[List[dict], int]:
        match = {}
        if search:
            pattern = contains_pattern(search)
            match["$or"] = [{"userName": pattern}, {"userEmail": pattern}]
        requests = self.joined_page(
            match,
            project={
                "_id": 1,
                "mealId": 1,
                "userName": 1,
                "userEmail": 1,
                "status": 1,
                "requestedAt": 1,
                "mealTitle": "$meal.title",
            },
            sort={"requestedAt": -1},
            skip=skip,
            limit=limit,
        )
        return requests, self.count(match)

    def mark_delivered(self, request_id: ObjectId, now: datetime) -> bool:
        """Returns False if no request matched"""
        result = self.collection.update_one(
            {"_id": request_id},
            {"$set": {"status": RequestStatus.DELIVERED.value, "deliveredAt": now}},
        )
        return result.matched_count > 0

    def delete_owned(self, request_id: ObjectId, user_email: str) -> bool:
        """Delete only if the request belongs to ``user_email``"""
        result = self.collection.delete_one({"_id": request_id, "userEmail": user_email})
        return result.deleted_count > 0
