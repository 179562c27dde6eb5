from typing import List, Optional, Tuple
import logging

from bson import ObjectId

from adapters.mongo_adapter import MongoStore
from app.exceptions import NotFoundError, ServiceValidationError
from repositories import MealRepository, ReviewRepository, parse_object_id
from services.common import skip_for, utcnow

logger = logging.getLogger("hostelmeals.reviews")


class ReviewService:
    """Reviews and the reviewCount they maintain on their meal.

    Each review insert/delete is paired with a reviewCount change on the parent
    meal. The pair is not transactional: a failed counter update is logged as
    ``review_count_drift`` and MealService.reconcile_review_count repairs it.
    """

    @staticmethod
    def create_review(
        store: MongoStore, meal_id: str, user_email: str, user_name: str, comment: str
    ) -> ObjectId:
        oid = parse_object_id(meal_id, "meal ID")
        meals = MealRepository(store.meals)
        reviews = ReviewRepository(store.reviews)
        if not meals.exists(oid):
            raise NotFoundError("Meal not found")

        review_id = reviews.insert(
            {
                "mealId": oid,
                "userEmail": user_email,
                "userName": user_name,
                "comment": comment.strip(),
                "createdAt": utcnow(),
            }
        )
        if not meals.increment_review_count(oid):
            # meal vanished between the check and the increment; undo the insert
            reviews.delete_by_id(review_id)
            logger.warning(f"review_count_drift meal_id={meal_id} review_id={review_id} op=create")
            raise NotFoundError("Meal not found")

        logger.info(f"review_created review_id={review_id} meal_id={meal_id} email={user_email}")
        return review_id

    @staticmethod
    def list_for_meal(store: MongoStore, meal_id: str) -> List[dict]:
        return ReviewRepository(store.reviews).for_meal(parse_object_id(meal_id, "meal ID"))

    @staticmethod
    def list_all(store: MongoStore, page: int = 1, limit: int = 10) -> Tuple[List[dict], int]:
        return ReviewRepository(store.reviews).all_with_meals(skip_for(page, limit), limit)

    @staticmethod
    def list_for_user(
        store: MongoStore, user_email: str, page: int = 1, limit: int = 10
    ) -> Tuple[List[dict], int]:
        return ReviewRepository(store.reviews).for_user(user_email, skip_for(page, limit), limit)

    @staticmethod
    def get_review(store: MongoStore, review_id: str) -> dict:
        review = ReviewRepository(store.reviews).get_by_id(parse_object_id(review_id, "review ID"))
        if not review:
            raise NotFoundError("Review not found")
        return review

    @staticmethod
    def update_review(
        store: MongoStore, review_id: str, comment: str, user_email: Optional[str] = None
    ) -> None:
        """Change a review's comment. With ``user_email`` only its author's review matches."""
        oid = parse_object_id(review_id, "review ID")
        comment = comment.strip()
        if not comment:
            raise ServiceValidationError("Comment cannot be empty")
        reviews = ReviewRepository(store.reviews)
        if not reviews.exists_for(oid, user_email):
            raise NotFoundError("Review not found")
        if not reviews.update_comment(oid, comment, utcnow(), user_email):
            raise ServiceValidationError("No changes made to the review")
        logger.info(f"review_updated review_id={review_id}")

    @staticmethod
    def delete_review(store: MongoStore, review_id: str, user_email: Optional[str] = None) -> dict:
        """Delete a review and decrement its meal's reviewCount. Returns the removed review.

        With ``user_email`` only its author's review matches; anyone else sees NotFound.
        """
        oid = parse_object_id(review_id, "review ID")
        review = ReviewRepository(store.reviews).find_and_delete(oid, user_email)
        if not review:
            raise NotFoundError("Review not found")

        if not MealRepository(store.meals).decrement_review_count(review["mealId"]):
            logger.warning(
                f"review_count_drift meal_id={review['mealId']} review_id={review_id} op=delete"
            )
        logger.info(f"review_deleted review_id={review_id} meal_id={review['mealId']}")
        return review
