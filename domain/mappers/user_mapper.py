"""
User domain mappers.
Handles transformation between stored user documents and response DTOs.
"""

from domain.rules import coerce_tier
from domain.schemas.user_schemas import UserProfileResponse, AdminProfileResponse


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_profile(user: dict) -> UserProfileResponse:
        """
        Convert a stored user document to the limited profile shown on "My Profile".

        Args:
            user: user document as stored in the users collection

        Returns:
            UserProfileResponse with the badge defaulted to Bronze
        """
        return UserProfileResponse(
            name=user.get("displayName") or "",
            image=user.get("photoURL") or "",
            email=user["email"],
            badge=coerce_tier(user.get("badge")),
        )

    @staticmethod
    def to_admin_profile(user: dict, meals_added_count: int) -> AdminProfileResponse:
        return AdminProfileResponse(
            name=user.get("displayName") or "",
            image=user.get("photoURL") or "",
            email=user["email"],
            meals_added_count=meals_added_count,
        )
