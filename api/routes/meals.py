"""Published meals: search, ranking, CRUD and likes"""

from fastapi import APIRouter, Depends, Header, Query, status
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import assert_actor, get_caller_identity, get_store
from app.config import settings
from api.responses import paginated_response, success_response
from domain.enums import MealSortField, SortOrder
from domain.mappers import document_out
from domain.schemas.engagement_schemas import LikeRequest
from domain.schemas.meal_schemas import MealCreate
from services.meal_service import MealService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("hostelmeals.api.meals")


@router.get("")
def search_meals(
    search: str = Query("", description="Matches title, description or category"),
    category: Optional[str] = Query(None, description="Exact category; 'All' disables it"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    sort_by_price: Optional[SortOrder] = Query(None, alias="sortByPrice"),
    page: int = Query(1, ge=1),
    limit: int = Query(6, ge=1, le=settings.max_page_size),
    store: MongoStore = Depends(get_store),
):
    meals, total = MealService.search_meals(
        store, search, category, min_price, max_price, sort_by_price, page, limit
    )
    return paginated_response(meals, total, page, limit)


@router.get("/ranked")
def ranked_meals(
    sort_by: MealSortField = Query(MealSortField.LIKES, alias="sortBy"),
    order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    store: MongoStore = Depends(get_store),
):
    """Meal summaries ordered by likes, review count or rating"""
    meals, total = MealService.list_ranked(store, sort_by, order, page, limit)
    return paginated_response(meals, total, page, limit)


@router.get("/{meal_id}")
def get_meal(meal_id: str, store: MongoStore = Depends(get_store)):
    return document_out(MealService.get_meal(store, meal_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_meal(
    body: MealCreate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.added_by_email)
    meal_id = MealService.create_meal(store, body)
    return success_response({"insertedId": str(meal_id)}, "Meal added")


@router.put("/{meal_id}")
def update_meal(
    meal_id: str,
    body: MealCreate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, body.added_by_email)
    MealService.update_meal(store, meal_id, body)
    return success_response({"mealId": meal_id}, "Meal updated")


@router.delete("/{meal_id}")
def delete_meal(
    meal_id: str,
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    MealService.delete_meal(store, meal_id, x_admin_email)
    return success_response({"mealId": meal_id}, "Meal deleted")


@router.patch("/{meal_id}/like")
def like_meal(
    meal_id: str,
    body: LikeRequest,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Like a meal at most once per user; a repeat answers 409"""
    assert_actor(identity, body.user_email)
    likes = MealService.like_meal(store, meal_id, body.user_email)
    return success_response({"mealId": meal_id, "likes": likes}, "Meal liked")


@router.post("/{meal_id}/review-count/reconcile")
def reconcile_review_count(
    meal_id: str,
    x_admin_email: Optional[str] = Header(None),
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    assert_actor(identity, x_admin_email)
    result = MealService.reconcile_review_count(store, meal_id, x_admin_email)
    return success_response(result, "Review count reconciled")
