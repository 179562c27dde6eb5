"""
Domain schemas package - Pydantic models for request validation.
"""

from domain.schemas.base import CamelModel
from domain.schemas.user_schemas import (
    UserUpsert,
    BadgeUpdate,
    UserProfileResponse,
    AdminProfileResponse,
)
from domain.schemas.meal_schemas import (
    MealCreate,
    UpcomingMealCreate,
    PublishRequest,
)
from domain.schemas.engagement_schemas import (
    LikeRequest,
    MealRequestCreate,
    ReviewCreate,
    ReviewUpdate,
)
from domain.schemas.payment_schemas import (
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentSave,
)

__all__ = [
    "CamelModel",
    "UserUpsert",
    "BadgeUpdate",
    "UserProfileResponse",
    "AdminProfileResponse",
    "MealCreate",
    "UpcomingMealCreate",
    "PublishRequest",
    "LikeRequest",
    "MealRequestCreate",
    "ReviewCreate",
    "ReviewUpdate",
    "PaymentIntentCreate",
    "PaymentIntentResponse",
    "PaymentSave",
]
