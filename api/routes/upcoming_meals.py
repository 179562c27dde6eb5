"""Upcoming meals: premium likes and publishing"""

from fastapi import APIRouter, Depends, status
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import assert_actor, get_caller_identity, get_store
from api.responses import success_response
from domain.mappers import documents_out
from domain.schemas.engagement_schemas import LikeRequest
from domain.schemas.meal_schemas import PublishRequest, UpcomingMealCreate
from services.upcoming_meal_service import UpcomingMealService

router = APIRouter(prefix="/upcoming-meals", tags=["Upcoming Meals"])
logger = logging.getLogger("hostelmeals.api.upcoming")


@router.get("")
def list_upcoming(store: MongoStore = Depends(get_store)):
    """All upcoming meals, soonest publish date first"""
    return documents_out(UpcomingMealService.list_upcoming(store))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_upcoming(
    body: UpcomingMealCreate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.added_by_email)
    meal_id = UpcomingMealService.create_upcoming(store, body)
    return success_response({"insertedId": str(meal_id)}, "Upcoming meal added")


@router.patch("/{meal_id}/like")
def like_upcoming(
    meal_id: str,
    body: LikeRequest,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.user_email)
    likes = UpcomingMealService.like_upcoming(store, meal_id, body.user_email)
    return success_response({"mealId": meal_id, "likes": likes}, "Upcoming meal liked")


@router.post("/publish")
def publish_meal(
    body: PublishRequest,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.added_by_email)
    new_id = UpcomingMealService.publish(store, body.meal_id, body.added_by_email)
    return success_response({"insertedId": str(new_id)}, "Meal published")
