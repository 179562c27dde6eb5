from typing import Any, Dict, List, Optional, Tuple
import logging

from bson import ObjectId

from adapters.mongo_adapter import MongoStore
from app.exceptions import NotFoundError
from domain.enums import MealSortField, SortOrder
from domain.schemas.meal_schemas import MealCreate
from repositories import MealRepository, ReviewRepository, parse_object_id
from repositories.base import contains_pattern
from services.common import apply_like, require_admin, skip_for, utcnow

logger = logging.getLogger("hostelmeals.meals")

RANKED_PROJECTION = {
    "title": 1,
    "likes": 1,
    "reviewCount": 1,
    "rating": 1,
    "distributorName": 1,
}


class MealService:
    """Business logic for published meals"""

    @staticmethod
    def search_meals(
        store: MongoStore,
        search: str = "",
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by_price: Optional[SortOrder] = None,
        page: int = 1,
        limit: int = 6,
    ) -> Tuple[List[dict], int]:
        """
        Search meals by text, category and price range.

        Args:
            search: substring matched against title, description and category
            category: exact category; "All" disables the filter
            min_price / max_price: inclusive price bounds
            sort_by_price: price ordering, unsorted when None

        Returns:
            (meals on the requested page, total matching meals)
        """
        query: Dict[str, Any] = {}
        if search:
            pattern = contains_pattern(search)
            query["$or"] = [
                {"title": pattern},
                {"description": pattern},
                {"category": pattern},
            ]
        if category and category != "All":
            query["category"] = category
        if min_price is not None or max_price is not None:
            query["price"] = {}
            if min_price is not None:
                query["price"]["$gte"] = min_price
            if max_price is not None:
                query["price"]["$lte"] = max_price

        sort = None
        if sort_by_price is not None:
            sort = [("price", 1 if sort_by_price == SortOrder.ASC else -1)]

        repo = MealRepository(store.meals)
        meals = repo.find_page(query, sort=sort, skip=skip_for(page, limit), limit=limit)
        return meals, repo.count(query)

    @staticmethod
    def list_ranked(
        store: MongoStore,
        sort_by: MealSortField = MealSortField.LIKES,
        order: SortOrder = SortOrder.DESC,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[dict], int]:
        """Summary listing ordered by likes, review count or rating"""
        repo = MealRepository(store.meals)
        direction = 1 if order == SortOrder.ASC else -1
        meals = repo.find_page(
            {},
            sort=[(sort_by.value, direction)],
            skip=skip_for(page, limit),
            limit=limit,
            projection=RANKED_PROJECTION,
        )
        return meals, repo.count()

    @staticmethod
    def get_meal(store: MongoStore, meal_id: str) -> dict:
        meal = MealRepository(store.meals).get_by_id(parse_object_id(meal_id, "meal ID"))
        if not meal:
            raise NotFoundError("Meal not found")
        return meal

    @staticmethod
    def create_meal(store: MongoStore, payload: MealCreate) -> ObjectId:
        """Insert a new meal on behalf of the admin named in ``addedByEmail``"""
        require_admin(store, payload.added_by_email, "add meals")
        doc = payload.to_document()
        doc.update(
            {
                "likes": 0,
                "reviewCount": 0,
                "rating": 0,
                "likedBy": [],
                "createdAt": utcnow(),
            }
        )
        meal_id = MealRepository(store.meals).insert(doc)
        logger.info(f"meal_created meal_id={meal_id} by={payload.added_by_email}")
        return meal_id

    @staticmethod
    def update_meal(store: MongoStore, meal_id: str, payload: MealCreate) -> None:
        """Replace the editable fields. Engagement counters and the creator are kept."""
        oid = parse_object_id(meal_id, "meal ID")
        require_admin(store, payload.added_by_email, "update meals")
        fields = payload.to_document()
        fields.pop("addedByEmail", None)
        fields["updatedAt"] = utcnow()
        if not MealRepository(store.meals).update_fields(oid, fields):
            raise NotFoundError("Meal not found")
        logger.info(f"meal_updated meal_id={meal_id} by={payload.added_by_email}")

    @staticmethod
    def delete_meal(store: MongoStore, meal_id: str, acting_email: str) -> None:
        oid = parse_object_id(meal_id, "meal ID")
        require_admin(store, acting_email, "delete meals")
        if not MealRepository(store.meals).delete_by_id(oid):
            raise NotFoundError("Meal not found")
        logger.info(f"meal_deleted meal_id={meal_id} by={acting_email}")

    @staticmethod
    def like_meal(store: MongoStore, meal_id: str, user_email: str) -> int:
        """Like a meal once per user. Returns the new like count."""
        oid = parse_object_id(meal_id, "meal ID")
        meal = apply_like(MealRepository(store.meals), oid, user_email, "Meal")
        logger.info(f"meal_liked meal_id={meal_id} email={user_email} likes={meal.get('likes')}")
        return meal.get("likes", 0)

    @staticmethod
    def reconcile_review_count(store: MongoStore, meal_id: str, acting_email: str) -> Dict[str, Any]:
        """Recount a meal's reviews and overwrite its reviewCount.

        Returns:
            dict with the stored and the actual count, and their difference
        """
        oid = parse_object_id(meal_id, "meal ID")
        require_admin(store, acting_email, "reconcile review counts")
        result = MealService._recount(store, oid)
        if result is None:
            raise NotFoundError("Meal not found")
        return result

    @staticmethod
    def recount_all_review_counts(store: MongoStore) -> int:
        """Recount every meal. Returns how many meals had drifted."""
        drifted = 0
        for meal in MealRepository(store.meals).find_page({}, projection={"_id": 1}):
            result = MealService._recount(store, meal["_id"])
            if result and result["drift"]:
                drifted += 1
        return drifted

    @staticmethod
    def _recount(store: MongoStore, oid: ObjectId) -> Optional[Dict[str, Any]]:
        actual = ReviewRepository(store.reviews).count_for_meal(oid)
        before = MealRepository(store.meals).replace_review_count(oid, actual)
        if before is None:
            return None
        stored = before.get("reviewCount", 0)
        drift = stored - actual
        if drift:
            logger.warning(f"review_count_drift meal_id={oid} stored={stored} actual={actual}")
        return {"mealId": str(oid), "stored": stored, "actual": actual, "drift": drift}
