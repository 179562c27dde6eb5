from typing import List
import logging

from bson import ObjectId

from adapters.mongo_adapter import MongoStore
from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ServiceValidationError
from domain.rules import can_like_upcoming, can_publish
from domain.schemas.meal_schemas import UpcomingMealCreate
from repositories import MealRepository, UpcomingMealRepository, UserRepository, parse_object_id
from services.common import apply_like, require_admin, utcnow

logger = logging.getLogger("hostelmeals.upcoming")


class UpcomingMealService:
    """Upcoming meals collect likes from premium members until they are published"""

    @staticmethod
    def list_upcoming(store: MongoStore) -> List[dict]:
        return UpcomingMealRepository(store.upcoming_meals).list_by_publish_date()

    @staticmethod
    def create_upcoming(store: MongoStore, payload: UpcomingMealCreate) -> ObjectId:
        require_admin(store, payload.added_by_email, "add upcoming meals")
        doc = payload.to_document()
        doc.update({"likes": 0, "likedBy": [], "createdAt": utcnow()})
        meal_id = UpcomingMealRepository(store.upcoming_meals).insert(doc)
        logger.info(f"upcoming_meal_created meal_id={meal_id} by={payload.added_by_email}")
        return meal_id

    @staticmethod
    def like_upcoming(store: MongoStore, meal_id: str, user_email: str) -> int:
        """Premium members (Silver and up) may like an upcoming meal once.

        Raises:
            ForbiddenError: unknown user or Bronze badge
            NotFoundError: no such upcoming meal
            ConflictError: already liked
        """
        oid = parse_object_id(meal_id, "meal ID")
        user = UserRepository(store.users).get_by_email(user_email)
        if not user or not can_like_upcoming(user.get("badge")):
            raise ForbiddenError("Only premium users can like meals")
        meal = apply_like(UpcomingMealRepository(store.upcoming_meals), oid, user_email, "Upcoming meal")
        logger.info(f"upcoming_meal_liked meal_id={meal_id} email={user_email} likes={meal.get('likes')}")
        return meal.get("likes", 0)

    @staticmethod
    def publish(store: MongoStore, meal_id: str, acting_email: str) -> ObjectId:
        """Move a sufficiently liked upcoming meal into the published meals.

        The published copy starts with fresh engagement counters. If another
        publish removed the source first, the copy made here is withdrawn.
        """
        oid = parse_object_id(meal_id, "meal ID")
        require_admin(store, acting_email, "publish meals")

        upcoming_repo = UpcomingMealRepository(store.upcoming_meals)
        upcoming = upcoming_repo.get_by_id(oid)
        if not upcoming:
            raise NotFoundError("Upcoming meal not found")

        min_likes = settings.publish_min_likes
        if not can_publish(upcoming.get("likes"), min_likes):
            raise ServiceValidationError(
                f"Cannot publish. Minimum {min_likes} likes required.",
                details={"likes": upcoming.get("likes", 0), "required": min_likes},
            )

        now = utcnow()
        meal = {
            "title": upcoming.get("title"),
            "category": upcoming.get("category"),
            "image": upcoming.get("image"),
            "ingredients": upcoming.get("ingredients"),
            "description": upcoming.get("description"),
            "price": upcoming.get("price"),
            "postTime": now,
            "distributorName": upcoming.get("distributorName"),
            "addedByEmail": acting_email,
            "likes": 0,
            "reviewCount": 0,
            "rating": 0,
            "likedBy": [],
            "createdAt": now,
        }
        meal_repo = MealRepository(store.meals)
        new_id = meal_repo.insert(meal)

        if not upcoming_repo.delete_by_id(oid):
            meal_repo.delete_by_id(new_id)
            logger.warning(f"publish_race meal_id={meal_id} withdrawn={new_id}")
            raise ConflictError("Upcoming meal was already published")

        logger.info(f"upcoming_meal_published meal_id={meal_id} new_meal_id={new_id} by={acting_email}")
        return new_id
