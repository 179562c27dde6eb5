"""
Helpers shared by the services: access guards, engagement and paging.
"""

from datetime import datetime, timezone
import logging

from bson import ObjectId

from adapters.mongo_adapter import MongoStore
from app.exceptions import ConflictError, ForbiddenError, NotFoundError
from domain.rules import ALREADY_ENGAGED, is_admin
from repositories import LikeableRepository, UserRepository

logger = logging.getLogger("hostelmeals.access")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def skip_for(page: int, limit: int) -> int:
    """Documents to skip for 1-based ``page``"""
    return (max(page, 1) - 1) * limit


def require_user(store: MongoStore, email: str) -> dict:
    user = UserRepository(store.users).get_by_email(email)
    if not user:
        raise NotFoundError("User not found", details={"email": email})
    return user


def require_admin(store: MongoStore, email: str, action: str) -> dict:
    """Return the acting admin's record or raise ForbiddenError.

    A missing acting email or user record is treated as non-admin.
    """
    user = UserRepository(store.users).get_by_email(email) if email else None
    if not is_admin(user):
        logger.warning(f"admin_required action={action} email={email}")
        raise ForbiddenError(f"Only admins can {action}")
    return user


def apply_like(repo: LikeableRepository, entity_id: ObjectId, actor_email: str, label: str) -> dict:
    """Like an entity at most once per actor.

    Raises:
        NotFoundError: no such entity
        ConflictError: the actor already liked it; the counter is untouched
    """
    doc = repo.add_like(entity_id, actor_email)
    if doc is not None:
        return doc
    if not repo.exists(entity_id):
        raise NotFoundError(f"{label} not found")
    raise ConflictError("Already liked", code=ALREADY_ENGAGED.upper())
