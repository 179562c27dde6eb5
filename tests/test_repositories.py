"""
Repository tests against mock collections.

These pin down the exact filters and update documents sent to MongoDB: the
at-most-once and never-downgrade rules live in those filters.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import ServiceValidationError
from domain.enums import Tier
from repositories import (
    MealRepository,
    MealRequestRepository,
    PaymentRepository,
    ReviewRepository,
    UpcomingMealRepository,
    UserRepository,
    parse_object_id,
)
from repositories.base import contains_pattern
from test_fixtures import delete_result, now, update_result


# =============================================================================
# IDENTIFIERS AND SEARCH
# =============================================================================


def test_parse_object_id_accepts_hex_and_object_ids():
    oid = ObjectId()
    assert parse_object_id(str(oid)) == oid
    assert parse_object_id(oid) is oid


@pytest.mark.parametrize("value", ["", "abc", "zz" * 12, None, 42, "a" * 25])
def test_parse_object_id_rejects_malformed(value):
    with pytest.raises(ServiceValidationError) as exc_info:
        parse_object_id(value, "meal ID")
    assert exc_info.value.message == "Invalid meal ID"


def test_contains_pattern_escapes_user_input():
    assert contains_pattern("a.b*") == {"$regex": r"a\.b\*", "$options": "i"}


# =============================================================================
# LIKES
# =============================================================================


def test_add_like_is_a_single_conditional_update():
    """
    Verifies:
    - The "not yet liked" check is part of the filter
    - Counter increment and actor-set insert happen in the same update
    """
    collection = MagicMock()
    meal_id = ObjectId()
    collection.find_one_and_update.return_value = {"_id": meal_id, "likes": 1}

    doc = MealRepository(collection).add_like(meal_id, "ravi@hostel.example.com")

    assert doc["likes"] == 1
    collection.find_one_and_update.assert_called_once_with(
        {"_id": meal_id, "likedBy": {"$ne": "ravi@hostel.example.com"}},
        {"$inc": {"likes": 1}, "$addToSet": {"likedBy": "ravi@hostel.example.com"}},
        return_document=ReturnDocument.AFTER,
    )


def test_add_like_returns_none_when_filter_misses():
    collection = MagicMock()
    collection.find_one_and_update.return_value = None
    assert UpcomingMealRepository(collection).add_like(ObjectId(), "x@hostel.example.com") is None


# =============================================================================
# USERS
# =============================================================================


def test_upsert_login_only_sets_badge_and_role_on_insert():
    collection = MagicMock()
    when = now()
    UserRepository(collection).upsert_login("new@hostel.example.com", "New", None, when)

    args, kwargs = collection.find_one_and_update.call_args
    assert args[0] == {"email": "new@hostel.example.com"}
    assert args[1]["$setOnInsert"] == {"badge": "Bronze", "role": "user", "createdAt": when}
    assert args[1]["$set"] == {"lastLoginAt": when, "displayName": "New"}
    assert kwargs["upsert"] is True


def test_upgrade_badge_never_downgrades():
    collection = MagicMock()
    collection.update_one.return_value = update_result(matched=0, modified=0)

    changed = UserRepository(collection).upgrade_badge("p@hostel.example.com", Tier.GOLD)

    assert changed is False
    collection.update_one.assert_called_once_with(
        {"email": "p@hostel.example.com", "badge": {"$nin": ["Gold", "Platinum"]}},
        {"$set": {"badge": "Gold"}},
    )


def test_promote_to_admin_reports_matched_and_modified():
    collection = MagicMock()
    collection.update_one.return_value = update_result(matched=1, modified=0)
    assert UserRepository(collection).promote_to_admin(ObjectId()) == (True, False)


def test_user_search_matches_name_or_email():
    collection = MagicMock()
    collection.find.return_value = iter([{"email": "a@hostel.example.com"}])
    collection.count_documents.return_value = 1

    users, total = UserRepository(collection).search("Aisha", skip=10, limit=10)

    assert total == 1 and len(users) == 1
    query = collection.find.call_args[0][0]
    assert query["$or"][0] == {"displayName": {"$regex": "Aisha", "$options": "i"}}
    assert collection.find.call_args[1]["skip"] == 10


# =============================================================================
# MEALS AND REVIEW COUNTS
# =============================================================================


def test_decrement_review_count_is_floored_at_zero():
    collection = MagicMock()
    collection.update_one.return_value = update_result(matched=0, modified=0)
    meal_id = ObjectId()

    assert MealRepository(collection).decrement_review_count(meal_id) is False
    collection.update_one.assert_called_once_with(
        {"_id": meal_id, "reviewCount": {"$gt": 0}}, {"$inc": {"reviewCount": -1}}
    )


def test_replace_review_count_returns_previous_document():
    collection = MagicMock()
    meal_id = ObjectId()
    MealRepository(collection).replace_review_count(meal_id, 4)
    collection.find_one_and_update.assert_called_once_with(
        {"_id": meal_id},
        {"$set": {"reviewCount": 4}},
        return_document=ReturnDocument.BEFORE,
    )


# =============================================================================
# MEAL REQUESTS
# =============================================================================


def test_create_if_absent_upserts_on_user_and_meal():
    collection = MagicMock()
    new_id = ObjectId()
    collection.update_one.return_value = update_result(matched=0, modified=0, upserted_id=new_id)
    meal_id = ObjectId()
    when = now()

    result = MealRequestRepository(collection).create_if_absent(
        meal_id, "ravi@hostel.example.com", "Ravi", when
    )

    assert result == new_id
    args, kwargs = collection.update_one.call_args
    assert args[0] == {"userEmail": "ravi@hostel.example.com", "mealId": meal_id}
    assert args[1] == {
        "$setOnInsert": {"userName": "Ravi", "status": "pending", "requestedAt": when}
    }
    assert kwargs == {"upsert": True}


def test_create_if_absent_returns_none_for_existing_pair():
    collection = MagicMock()
    collection.update_one.return_value = update_result(matched=1, modified=0, upserted_id=None)
    assert MealRequestRepository(collection).create_if_absent(ObjectId(), "a@h.io", "A", now()) is None


def test_create_if_absent_returns_none_on_concurrent_duplicate():
    collection = MagicMock()
    collection.update_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    assert MealRequestRepository(collection).create_if_absent(ObjectId(), "a@h.io", "A", now()) is None


def test_for_user_joins_meal_and_drops_orphans():
    collection = MagicMock()
    collection.aggregate.return_value = iter([])
    collection.count_documents.return_value = 0

    MealRequestRepository(collection).for_user("ravi@hostel.example.com", skip=0, limit=10)

    pipeline = collection.aggregate.call_args[0][0]
    stages = [next(iter(stage)) for stage in pipeline]
    assert stages == ["$match", "$lookup", "$unwind", "$project", "$sort", "$skip", "$limit"]
    assert pipeline[1]["$lookup"]["from"] == "meals"
    assert pipeline[2] == {"$unwind": "$meal"}


def test_delete_owned_scopes_to_owner():
    collection = MagicMock()
    collection.delete_one.return_value = delete_result(0)
    request_id = ObjectId()

    assert MealRequestRepository(collection).delete_owned(request_id, "other@h.io") is False
    collection.delete_one.assert_called_once_with({"_id": request_id, "userEmail": "other@h.io"})


# =============================================================================
# REVIEWS AND PAYMENTS
# =============================================================================


def test_update_comment_skips_identical_text():
    collection = MagicMock()
    collection.update_one.return_value = update_result(matched=0, modified=0)
    review_id = ObjectId()
    when = now()

    assert ReviewRepository(collection).update_comment(review_id, "Tasty", when) is False
    collection.update_one.assert_called_once_with(
        {"_id": review_id, "comment": {"$ne": "Tasty"}},
        {"$set": {"comment": "Tasty", "updatedAt": when}},
    )


def test_pending_tier_lists_unapplied_payments_oldest_first():
    collection = MagicMock()
    collection.find.return_value = iter([])

    PaymentRepository(collection).pending_tier()

    args, kwargs = collection.find.call_args
    assert args[0] == {"tierApplied": False}
    assert kwargs["sort"] == [("recordedAt", 1)]


def test_update_comment_scoped_to_author():
    collection = MagicMock()
    collection.update_one.return_value = update_result()
    review_id = ObjectId()
    when = now()

    assert ReviewRepository(collection).update_comment(review_id, "Edited", when, "ravi@h.io") is True
    collection.update_one.assert_called_once_with(
        {"_id": review_id, "userEmail": "ravi@h.io", "comment": {"$ne": "Edited"}},
        {"$set": {"comment": "Edited", "updatedAt": when}},
    )
