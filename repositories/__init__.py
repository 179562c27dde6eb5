"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository, parse_object_id
from repositories.user_repository import UserRepository
from repositories.meal_repository import (
    LikeableRepository,
    MealRepository,
    UpcomingMealRepository,
)
from repositories.meal_request_repository import MealRequestRepository
from repositories.review_repository import ReviewRepository
from repositories.payment_repository import PaymentRepository

__all__ = [
    "BaseRepository",
    "parse_object_id",
    "UserRepository",
    "LikeableRepository",
    "MealRepository",
    "UpcomingMealRepository",
    "MealRequestRepository",
    "ReviewRepository",
    "PaymentRepository",
]
