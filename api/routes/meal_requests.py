"""Meal requests from premium members and their serving by admins"""

from fastapi import APIRouter, Depends, Header, Query, status
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import assert_actor, get_caller_identity, get_store
from app.config import settings
from api.responses import paginated_response, success_response
from domain.schemas.engagement_schemas import MealRequestCreate
from services.meal_request_service import MealRequestService

router = APIRouter(prefix="/meal-requests", tags=["Meal Requests"])
logger = logging.getLogger("hostelmeals.api.requests")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_request(
    body: MealRequestCreate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Request a meal; Bronze members get 403, a repeat request gets 409"""
    assert_actor(identity, body.user_email)
    request_id = MealRequestService.create_request(
        store, body.meal_id, body.user_email, body.user_name
    )
    return success_response({"insertedId": str(request_id)}, "Meal requested")


@router.get("")
def list_for_serving(
    search: str = Query("", description="Matches requester name or email"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    items, total = MealRequestService.list_for_serving(store, x_admin_email, search, page, limit)
    return paginated_response(items, total, page, limit)


@router.get("/user/{email}")
def list_for_user(
    email: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    store: MongoStore = Depends(get_store),
):
    items, total = MealRequestService.list_for_user(store, email, page, limit)
    return paginated_response(items, total, page, limit)


@router.patch("/{request_id}")
def mark_delivered(
    request_id: str,
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    MealRequestService.mark_delivered(store, request_id, x_admin_email)
    return success_response({"requestId": request_id, "status": "delivered"}, "Meal served")


@router.delete("/{request_id}")
def cancel_request(
    request_id: str,
    x_user_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_user_email)
    MealRequestService.cancel_request(store, request_id, x_user_email)
    return success_response({"requestId": request_id}, "Meal request cancelled")
