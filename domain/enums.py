"""
Domain enums for the hostel meals application.
Contains all enumeration types used across the domain rules and schemas.
"""

import enum


class Tier(str, enum.Enum):
    """Membership badge, ordered from free to top tier"""

    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class Role(str, enum.Enum):
    """User role"""

    USER = "user"
    ADMIN = "admin"


class RequestStatus(str, enum.Enum):
    """Meal request lifecycle"""

    PENDING = "pending"
    DELIVERED = "delivered"


class MealSortField(str, enum.Enum):
    """Fields the ranked meal listing may sort on"""

    LIKES = "likes"
    REVIEW_COUNT = "reviewCount"
    RATING = "rating"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"
