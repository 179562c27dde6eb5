"""Reviews and their listings"""

from fastapi import APIRouter, Depends, Query, status
import logging
from typing import Optional

from adapters.identity_adapter import Identity
from adapters.mongo_adapter import MongoStore
from api.dependencies import assert_actor, get_caller_identity, get_store, require_identity
from app.config import settings
from api.responses import paginated_response, success_response
from domain.mappers import document_out, documents_out
from domain.schemas.engagement_schemas import ReviewCreate, ReviewUpdate
from services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = logging.getLogger("hostelmeals.api.reviews")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """Add a review and bump the meal's reviewCount"""
    assert_actor(identity, body.user_email)
    review_id = ReviewService.create_review(
        store, body.meal_id, body.user_email, body.user_name, body.comment
    )
    return success_response({"insertedId": str(review_id)}, "Review added")


@router.get("")
def list_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    store: MongoStore = Depends(get_store),
):
    """All reviews joined with their meal's title, likes and reviewCount"""
    items, total = ReviewService.list_all(store, page, limit)
    return paginated_response(items, total, page, limit)


@router.get("/user/{email}")
def list_user_reviews(
    email: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
    identity: Identity = Depends(require_identity),
    store: MongoStore = Depends(get_store),
):
    """A member's own reviews; needs a verified token for that member"""
    assert_actor(identity, email)
    items, total = ReviewService.list_for_user(store, email, page, limit)
    return paginated_response(items, total, page, limit)


@router.get("/detail/{review_id}")
def get_review(review_id: str, store: MongoStore = Depends(get_store)):
    return document_out(ReviewService.get_review(store, review_id))


@router.get("/{meal_id}")
def list_meal_reviews(meal_id: str, store: MongoStore = Depends(get_store)):
    return documents_out(ReviewService.list_for_meal(store, meal_id))


@router.put("/{review_id}")
def update_review(
    review_id: str,
    body: ReviewUpdate,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    """In strict mode only the review's author may edit it"""
    owner = identity.email if identity else None
    ReviewService.update_review(store, review_id, body.comment, owner)
    return success_response({"reviewId": review_id}, "Review updated")


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    store: MongoStore = Depends(get_store),
    identity: Optional[Identity] = Depends(get_caller_identity),
):
    owner = identity.email if identity else None
    review = ReviewService.delete_review(store, review_id, owner)
    return success_response(
        {"reviewId": review_id, "mealId": str(review["mealId"])}, "Review deleted"
    )
