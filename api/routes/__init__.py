"""API routes package"""

from . import health, users, meals, upcoming_meals, meal_requests, reviews, payments, dashboard

__all__ = [
    "health",
    "users",
    "meals",
    "upcoming_meals",
    "meal_requests",
    "reviews",
    "payments",
    "dashboard",
]
