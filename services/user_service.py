from typing import List, Optional, Tuple
import logging

from adapters.mongo_adapter import MongoStore
from app.exceptions import NotFoundError
from domain.enums import Tier
from domain.mappers import UserMapper
from domain.rules import is_admin
from domain.schemas.user_schemas import AdminProfileResponse, UserProfileResponse
from repositories import MealRepository, UserRepository, parse_object_id
from services.common import require_admin, skip_for, utcnow

logger = logging.getLogger("hostelmeals.users")


class UserService:
    """Business logic for user accounts, badges and roles"""

    @staticmethod
    def upsert_user(
        store: MongoStore,
        email: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> dict:
        """Create on first login with Bronze badge and user role; refresh name/photo otherwise."""
        user = UserRepository(store.users).upsert_login(email, display_name, photo_url, utcnow())
        logger.info(f"user_upserted email={email} badge={user.get('badge')}")
        return user

    @staticmethod
    def get_user(store: MongoStore, email: str) -> dict:
        user = UserRepository(store.users).get_by_email(email)
        if not user:
            logger.warning(f"user_not_found email={email}")
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def list_users(
        store: MongoStore, search: str = "", page: int = 1, limit: int = 10
    ) -> Tuple[List[dict], int]:
        return UserRepository(store.users).search(search, skip_for(page, limit), limit)

    @staticmethod
    def get_profile(store: MongoStore, email: str) -> UserProfileResponse:
        return UserMapper.to_profile(UserService.get_user(store, email))

    @staticmethod
    def check_admin(store: MongoStore, email: str) -> bool:
        return is_admin(UserRepository(store.users).get_by_email(email))

    @staticmethod
    def get_admin_profile(store: MongoStore, email: str) -> AdminProfileResponse:
        admin = UserRepository(store.users).get_admin_by_email(email)
        if not admin:
            raise NotFoundError("Admin user not found")
        meals_added = MealRepository(store.meals).count_by_creator(email)
        return UserMapper.to_admin_profile(admin, meals_added)

    @staticmethod
    def update_badge(store: MongoStore, acting_email: str, target_email: str, badge: Tier) -> Tier:
        """Admin override of a user's badge; may move the badge in either direction."""
        require_admin(store, acting_email, "update badges")
        if not UserRepository(store.users).set_badge(target_email, badge):
            raise NotFoundError("User not found")
        logger.info(f"badge_updated email={target_email} badge={badge.value} by={acting_email}")
        return badge

    @staticmethod
    def make_admin(store: MongoStore, acting_email: str, user_id: str) -> bool:
        """Promote a user to admin. Returns False when the user already was one."""
        oid = parse_object_id(user_id, "user ID")
        require_admin(store, acting_email, "promote users")
        matched, modified = UserRepository(store.users).promote_to_admin(oid)
        if not matched:
            raise NotFoundError("User not found")
        logger.info(f"user_promoted user_id={user_id} changed={modified} by={acting_email}")
        return modified
