"""
Shared test fixtures and utilities for the Hostel Meals test suite.

Services and repositories are exercised against ``unittest.mock`` collections
so the exact filters and updates sent to MongoDB can be asserted. The
application is driven through a module-level TestClient whose store dependency
is replaced per test.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.dependencies import get_payment_gateway, get_store
from main import app

# The lifespan only runs inside ``with TestClient(app)``; it is never entered
# here, so no MongoDB connection is attempted.
client = TestClient(app)


def unique_email(prefix: str = "student") -> str:
    """Generate unique email address using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4().hex[:8]}@hostel.example.com"


def now() -> datetime:
    return datetime.now(timezone.utc)


def make_store() -> MagicMock:
    """
    Mock store whose collection attributes are independent MagicMocks.

    Example:
        >>> store = make_store()
        >>> store.users.find_one.return_value = make_user(badge="Gold")
    """
    store = MagicMock()
    store.is_connected = True
    return store


def update_result(matched: int = 1, modified: int = 1, upserted_id=None) -> SimpleNamespace:
    """Stand-in for pymongo's UpdateResult"""
    return SimpleNamespace(
        matched_count=matched, modified_count=modified, upserted_id=upserted_id
    )


def delete_result(deleted: int = 1) -> SimpleNamespace:
    return SimpleNamespace(deleted_count=deleted)


def insert_result(inserted_id=None) -> SimpleNamespace:
    return SimpleNamespace(inserted_id=inserted_id or ObjectId())


def make_user(email=None, badge="Bronze", role="user", name="Aisha Rahman") -> dict:
    """
    Stored user document.

    Args:
        badge: Bronze (free), Silver, Gold or Platinum
        role: "user" or "admin"
    """
    return {
        "_id": ObjectId(),
        "email": email or unique_email(),
        "displayName": name,
        "photoURL": "https://img.example.com/a.png",
        "badge": badge,
        "role": role,
        "createdAt": now(),
    }


def make_admin(email=None) -> dict:
    return make_user(email=email or unique_email("warden"), badge="Platinum", role="admin", name="Hostel Warden")


def make_meal(meal_id=None, likes=0, liked_by=None, review_count=0, title="Chicken Biryani") -> dict:
    """Stored meal (or upcoming meal) document with its engagement counters"""
    return {
        "_id": meal_id or ObjectId(),
        "title": title,
        "category": "Lunch",
        "image": "https://img.example.com/biryani.jpg",
        "ingredients": ["rice", "chicken", "saffron"],
        "description": "Fragrant rice with spiced chicken",
        "price": 4.5,
        "distributorName": "Main Mess",
        "addedByEmail": "warden@hostel.example.com",
        "likes": likes,
        "likedBy": list(liked_by or []),
        "reviewCount": review_count,
        "rating": 0,
        "postTime": now(),
    }


def meal_payload(added_by_email="warden@hostel.example.com", **overrides) -> dict:
    """JSON body for POST/PUT /meals as the web client sends it"""
    body = {
        "title": "Paneer Tikka",
        "category": "Dinner",
        "image": "https://img.example.com/paneer.jpg",
        "ingredients": "paneer, yoghurt, spices",
        "description": "Grilled cottage cheese",
        "price": 3.25,
        "postTime": "2026-10-01T12:00:00Z",
        "distributorName": "Main Mess",
        "addedByEmail": added_by_email,
    }
    body.update(overrides)
    return body


@pytest.fixture
def store():
    """Mock store injected into every route through the get_store dependency"""
    mock_store = make_store()
    app.dependency_overrides[get_store] = lambda: mock_store
    yield mock_store
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def gateway():
    mock_gateway = MagicMock()
    app.dependency_overrides[get_payment_gateway] = lambda: mock_gateway
    yield mock_gateway
    app.dependency_overrides.pop(get_payment_gateway, None)


def install_verifier(monkeypatch, email: str) -> None:
    """Make every bearer token verify as ``email``"""
    from adapters.identity_adapter import Identity

    class StubVerifier:
        def verify(self, token):
            return Identity(email=email, uid="uid-stub", claims={"email": email})

    monkeypatch.setattr(app.state, "token_verifier", StubVerifier(), raising=False)
