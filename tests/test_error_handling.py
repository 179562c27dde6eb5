"""
Error envelope and status mapping tests.

Every failure renders as
{"success": false, "message", "error": {"code", "message", "details"}, "timestamp"}.
"""

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
    UnauthorizedError,
    UpstreamServiceError,
)
from main import app
from services import MealService, PaymentService
from test_fixtures import client, gateway, make_admin, make_meal, make_user, meal_payload, store


# =============================================================================
# STATUS MAPPING
# =============================================================================


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (ServiceValidationError("Invalid meal ID"), 400, "INVALID_INPUT"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError("Only admins can delete meals"), 403, "FORBIDDEN"),
        (NotFoundError("Meal not found"), 404, "NOT_FOUND"),
        (ConflictError("Already liked", code="ALREADY_ENGAGED"), 409, "ALREADY_ENGAGED"),
        (UpstreamServiceError("Payment processor error"), 500, "UPSTREAM_ERROR"),
    ],
)
def test_app_errors_map_to_status(monkeypatch, store, exc, status, code):
    def boom(s, meal_id):
        raise exc

    monkeypatch.setattr(MealService, "get_meal", boom)

    r = client.get(f"/meals/{ObjectId()}")

    assert r.status_code == status
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["message"] == exc.message
    assert "timestamp" in body


def test_storage_failure_is_generic_500(monkeypatch, store):
    """Unexpected errors, pymongo ones included, do not leak their text"""

    def down(s, meal_id):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    monkeypatch.setattr(MealService, "get_meal", down)
    quiet_client = TestClient(app, raise_server_exceptions=False)

    r = quiet_client.get(f"/meals/{ObjectId()}")

    assert r.status_code == 500
    assert r.json()["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert "27017" not in r.text


def test_store_unavailable_without_override():
    r = client.get(f"/meals/{ObjectId()}")
    assert r.status_code == 500
    assert r.json()["error"]["code"] == "STORAGE_UNAVAILABLE"


# =============================================================================
# INPUT VALIDATION
# =============================================================================


def test_malformed_meal_id_is_400(store):
    """The real service validates the id before touching the store"""
    r = client.get("/meals/not-a-valid-id")
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid meal ID"
    store.meals.find_one.assert_not_called()


def test_missing_body_fields_are_400(store):
    body = meal_payload()
    del body["title"]
    r = client.post("/meals", json=body)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_invalid_email_in_like_is_400(store):
    r = client.patch(f"/meals/{ObjectId()}/like", json={"userEmail": "not-an-email"})
    assert r.status_code == 400


def test_negative_price_is_400(store):
    r = client.post("/meals", json=meal_payload(price=-1))
    assert r.status_code == 400


def test_page_size_is_capped(store):
    r = client.get("/meals", params={"limit": 500})
    assert r.status_code == 400


def test_payment_intent_needs_positive_amount(gateway):
    r = client.post(
        "/create-payment-intent",
        json={"amount": 0, "packageName": "Gold", "userEmail": "b@hostel.example.com"},
    )
    assert r.status_code == 400


def test_unknown_package_is_400(gateway):
    r = client.post(
        "/create-payment-intent",
        json={"amount": 500, "packageName": "Diamond", "userEmail": "b@hostel.example.com"},
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_PAYMENT"
    gateway.create_payment_intent.assert_not_called()


def test_unknown_route_is_404():
    r = client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json()["success"] is False


# =============================================================================
# END TO END THROUGH REAL SERVICES
# =============================================================================


def test_like_flow_through_real_service(store):
    """
    Verifies:
    - First like answers 200 with the count
    - A repeat answers 409 ALREADY_ENGAGED
    """
    meal = make_meal(likes=3)
    store.meals.find_one_and_update.side_effect = [{**meal, "likes": 4}, None]
    store.meals.count_documents.return_value = 1
    path = f"/meals/{meal['_id']}/like"

    first = client.patch(path, json={"userEmail": "r@hostel.example.com"})
    second = client.patch(path, json={"userEmail": "r@hostel.example.com"})

    assert first.status_code == 200
    assert first.json()["data"]["likes"] == 4
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "ALREADY_ENGAGED"


def test_bronze_request_through_real_service_is_403(store):
    store.users.find_one.return_value = make_user(badge="Bronze")
    r = client.post(
        "/meal-requests",
        json={"mealId": str(ObjectId()), "userEmail": "free@hostel.example.com", "userName": "Free"},
    )
    assert r.status_code == 403


def test_publish_with_nine_likes_through_real_service_is_400(store):
    store.users.find_one.return_value = make_admin("warden@hostel.example.com")
    upcoming = make_meal(likes=9)
    store.upcoming_meals.find_one.return_value = upcoming

    r = client.post(
        "/upcoming-meals/publish",
        json={"mealId": str(upcoming["_id"]), "addedByEmail": "warden@hostel.example.com"},
    )

    assert r.status_code == 400
    assert r.json()["message"] == "Cannot publish. Minimum 10 likes required."


def test_upstream_payment_failure_is_500(monkeypatch, gateway):
    gateway.create_payment_intent.side_effect = UpstreamServiceError("Payment processor unavailable")
    r = client.post(
        "/create-payment-intent",
        json={"amount": 500, "packageName": "Silver", "userEmail": "b@hostel.example.com"},
    )
    assert r.status_code == 500
    assert r.json()["error"]["code"] == "UPSTREAM_ERROR"
