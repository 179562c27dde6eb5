from typing import Any, Dict

from adapters.mongo_adapter import MongoStore
from repositories import (
    MealRepository,
    MealRequestRepository,
    ReviewRepository,
    UserRepository,
)


class DashboardService:
    @staticmethod
    def overview_stats(store: MongoStore) -> Dict[str, Any]:
        """Collection totals and the five most liked meals"""
        meals = MealRepository(store.meals)
        return {
            "totalUsers": UserRepository(store.users).count(),
            "totalMeals": meals.count(),
            "totalRequests": MealRequestRepository(store.meal_requests).count(),
            "totalReviews": ReviewRepository(store.reviews).count(),
            "mealLikes": meals.top_liked(5),
        }
