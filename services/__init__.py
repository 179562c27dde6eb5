"""Services package - Business logic layer"""

from services.user_service import UserService
from services.meal_service import MealService
from services.upcoming_meal_service import UpcomingMealService
from services.meal_request_service import MealRequestService
from services.review_service import ReviewService
from services.payment_service import PaymentService
from services.dashboard_service import DashboardService

__all__ = [
    "UserService",
    "MealService",
    "UpcomingMealService",
    "MealRequestService",
    "ReviewService",
    "PaymentService",
    "DashboardService",
]
