from typing import List, Tuple
import logging

from bson import ObjectId

from adapters.mongo_adapter import MongoStore
from app.exceptions import ConflictError, ForbiddenError, NotFoundError
from domain.rules import can_request_meal
from repositories import MealRepository, MealRequestRepository, parse_object_id
from services.common import require_admin, require_user, skip_for, utcnow

logger = logging.getLogger("hostelmeals.requests")


class MealRequestService:
    """Meal requests: premium members ask for a meal, admins serve it"""

    @staticmethod
    def create_request(store: MongoStore, meal_id: str, user_email: str, user_name: str) -> ObjectId:
        """
        Request a meal, at most once per user and meal.

        Raises:
            ServiceValidationError: malformed meal id
            NotFoundError: unknown user or meal
            ForbiddenError: the user's badge is Bronze
            ConflictError: the user already requested this meal
        """
        oid = parse_object_id(meal_id, "meal ID")
        user = require_user(store, user_email)
        if not can_request_meal(user.get("badge")):
            logger.info(f"meal_request_forbidden email={user_email} badge={user.get('badge')}")
            raise ForbiddenError("Only Silver, Gold, or Platinum users can request meals.")
        if not MealRepository(store.meals).exists(oid):
            raise NotFoundError("Meal not found")

        request_id = MealRequestRepository(store.meal_requests).create_if_absent(
            oid, user_email, user_name, utcnow()
        )
        if request_id is None:
            raise ConflictError("You have already requested this meal.", code="ALREADY_ENGAGED")
        logger.info(f"meal_requested request_id={request_id} meal_id={meal_id} email={user_email}")
        return request_id

    @staticmethod
    def list_for_user(
        store: MongoStore, user_email: str, page: int = 1, limit: int = 10
    ) -> Tuple[List[dict], int]:
        return MealRequestRepository(store.meal_requests).for_user(
            user_email, skip_for(page, limit), limit
        )

    @staticmethod
    def list_for_serving(
        store: MongoStore, acting_email: str, search: str = "", page: int = 1, limit: int = 10
    ) -> Tuple[List[dict], int]:
        require_admin(store, acting_email, "view meal requests")
        return MealRequestRepository(store.meal_requests).for_serving(
            search, skip_for(page, limit), limit
        )

    @staticmethod
    def mark_delivered(store: MongoStore, request_id: str, acting_email: str) -> None:
        oid = parse_object_id(request_id, "request ID")
        require_admin(store, acting_email, "serve meals")
        if not MealRequestRepository(store.meal_requests).mark_delivered(oid, utcnow()):
            raise NotFoundError("Meal request not found")
        logger.info(f"meal_request_delivered request_id={request_id} by={acting_email}")

    @staticmethod
    def cancel_request(store: MongoStore, request_id: str, user_email: str) -> None:
        """Owners cancel their own requests; anyone else sees NotFound."""
        oid = parse_object_id(request_id, "request ID")
        if not MealRequestRepository(store.meal_requests).delete_owned(oid, user_email):
            raise NotFoundError("Meal request not found")
        logger.info(f"meal_request_cancelled request_id={request_id} email={user_email}")
