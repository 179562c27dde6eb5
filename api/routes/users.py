"""User accounts, badges and admin roles"""

from fastapi import APIRouter, Depends, Header, Query
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import assert_actor, get_caller_identity, get_store
from app.config import settings
from api.responses import paginated_response, success_response
from domain.mappers import document_out
from domain.schemas.user_schemas import (
    AdminProfileResponse,
    BadgeUpdate,
    UserProfileResponse,
    UserUpsert,
)
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("hostelmeals.api.users")


@router.post("/upsert")
def upsert_user(
    body: UserUpsert,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Called on every login: creates the account on first sight, refreshes name and photo after."""
    assert_actor(identity, body.email)
    user = UserService.upsert_user(store, body.email, body.display_name, body.photo_url)
    return success_response(document_out(user), "User saved")


@router.get("")
def list_users(
    search: str = Query("", description="Matches display name or email"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    store: MongoStore = Depends(get_store),
):
    users, total = UserService.list_users(store, search, page, limit)
    return paginated_response(users, total, page, limit)


@router.get("/{email}/profile", response_model=UserProfileResponse)
def get_profile(email: str, store: MongoStore = Depends(get_store)):
    return UserService.get_profile(store, email)


@router.get("/{email}/admin-status")
def get_admin_status(email: str, store: MongoStore = Depends(get_store)):
    return {"isAdmin": UserService.check_admin(store, email)}


@router.get("/{email}/admin-profile", response_model=AdminProfileResponse)
def get_admin_profile(email: str, store: MongoStore = Depends(get_store)):
    """Admin card with the number of meals the admin has added"""
    return UserService.get_admin_profile(store, email)


@router.get("/{email}")
def get_user(email: str, store: MongoStore = Depends(get_store)):
    return document_out(UserService.get_user(store, email))


@router.patch("/{email}/badge")
def update_badge(
    email: str,
    body: BadgeUpdate,
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    badge = UserService.update_badge(store, x_admin_email, email, body.badge)
    return success_response({"email": email, "badge": badge.value}, "Badge updated")


@router.patch("/{user_id}/make-admin")
def make_admin(
    user_id: str,
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Promote a user; repeating the call is harmless and reports modified=false"""
    assert_actor(identity, x_admin_email)
    modified = UserService.make_admin(store, x_admin_email, user_id)
    message = "User promoted to admin" if modified else "User is already an admin"
    return success_response({"userId": user_id, "modified": modified}, message)
