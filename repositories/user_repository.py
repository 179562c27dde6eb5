"""
User Repository - Data access layer for user documents
"""

from datetime import datetime
from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from repositories.base import BaseRepository, contains_pattern
from domain.enums import Role, Tier
from domain.rules import DEFAULT_TIER, tiers_at_or_above


class UserRepository(BaseRepository):
    """Repository for user data access. Email is the natural key."""

    def __init__(self, collection: Collection):
        super().__init__(collection)

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def get_admin_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email, "role": Role.ADMIN.value})

    def upsert_login(
        self,
        email: str,
        display_name: Optional[str],
        photo_url: Optional[str],
        now: datetime,
    ) -> dict:
        """Create the user on first login, refresh name/photo on later ones.

        Badge and role are only written on insert so a login never resets them.
        """
        fields = {"lastLoginAt": now}
        if display_name is not None:
            fields["displayName"] = display_name
        if photo_url is not None:
            fields["photoURL"] = photo_url
        return self.collection.find_one_and_update(
            {"email": email},
            {
                "$setOnInsert": {
                    "badge": DEFAULT_TIER.value,
                    "role": Role.USER.value,
                    "createdAt": now,
                },
                "$set": fields,
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def search(self, search: str, skip: int, limit: int) -> Tuple[List[dict], int]:
        """Users whose display name or email contains ``search``, with total count"""
        query = {}
        if search:
            pattern = contains_pattern(search)
            query["$or"] = [{"displayName": pattern}, {"email": pattern}]
        users = self.find_page(query, sort=[("_id", 1)], skip=skip, limit=limit)
        return users, self.count(query)

    def set_badge(self, email: str, badge: Tier) -> bool:
        """Unconditional badge write (admin action). Returns False if no such user."""
        result = self.collection.update_one({"email": email}, {"$set": {"badge": badge.value}})
        return result.matched_count > 0

    def upgrade_badge(self, email: str, badge: Tier) -> bool:
        """Raise the badge to ``badge`` unless the user already ranks at or above it.

        The rank check is part of the update filter, so concurrent payments
        cannot move a user downwards. Returns True if the badge changed.
        """
        result = self.collection.update_one(
            {"email": email, "badge": {"$nin": tiers_at_or_above(badge)}},
            {"$set": {"badge": badge.value}},
        )
        return result.modified_count > 0

    def promote_to_admin(self, user_id: ObjectId) -> Tuple[bool, bool]:
        """Returns (matched, modified); modified is False for an existing admin."""
        result = self.collection.update_one(
            {"_id": user_id}, {"$set": {"role": Role.ADMIN.value}}
        )
        return result.matched_count > 0, result.modified_count > 0
