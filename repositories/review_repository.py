"""
Review Repository - comments left on meals
"""

from datetime import datetime
from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo.collection import Collection

from repositories.base import BaseRepository


class ReviewRepository(BaseRepository):
    """Repository for reviews"""

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def for_meal(self, meal_id: ObjectId) -> List[dict]:
        return self.find_page({"mealId": meal_id}, sort=[("createdAt", -1)])

    def count_for_meal(self, meal_id: ObjectId) -> int:
        return self.count({"mealId": meal_id})

    def all_with_meals(self, skip: int, limit: int) -> Tuple[List[dict], int]:
        reviews = self.joined_page(
            {},
            project={
                "_id": 1,
                "comment": 1,
                "createdAt": 1,
                "userEmail": 1,
                "userName": 1,
                "mealId": "$meal._id",
                "mealTitle": "$meal.title",
                "mealLikes": "$meal.likes",
                "mealReviewCount": "$meal.reviewCount",
            },
            sort={"createdAt": -1},
            skip=skip,
            limit=limit,
        )
        return reviews, self.count()

    def for_user(self, user_email: str, skip: int, limit: int) -> Tuple[List[dict], int]:
        match = {"userEmail": user_email}
        reviews = self.joined_page(
            match,
            project={
                "_id": 1,
                "comment": 1,
                "createdAt": 1,
                "mealId": "$meal._id",
                "mealTitle": "$meal.title",
                "likes": "$meal.likes",
            },
            sort={"createdAt": -1},
            skip=skip,
            limit=limit,
        )
        return reviews, self.count(match)

    def _scoped(self, review_id: ObjectId, user_email: Optional[str]) -> dict:
        """Filter on the review, narrowed to its author when ``user_email`` is given"""
        query = {"_id": review_id}
        if user_email is not None:
            query["userEmail"] = user_email
        return query

    def exists_for(self, review_id: ObjectId, user_email: Optional[str] = None) -> bool:
        return self.collection.count_documents(self._scoped(review_id, user_email), limit=1) > 0

    def update_comment(
        self, review_id: ObjectId, comment: str, now: datetime, user_email: Optional[str] = None
    ) -> bool:
        """Returns False when the stored comment is already ``comment``"""
        query = self._scoped(review_id, user_email)
        query["comment"] = {"$ne": comment}
        result = self.collection.update_one(
            query, {"$set": {"comment": comment, "updatedAt": now}}
        )
        return result.modified_count > 0

    def find_and_delete(self, review_id: ObjectId, user_email: Optional[str] = None) -> Optional[dict]:
        """Delete and return the removed review, or None if it did not exist"""
        return self.collection.find_one_and_delete(self._scoped(review_id, user_email))
