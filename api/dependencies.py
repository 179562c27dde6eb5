"""
API dependencies for dependency injection.

Long-lived clients are created in the application lifespan and kept on
``app.state``; these functions hand them to route handlers.
"""

from typing import Optional

from fastapi import Header, Request

from adapters.identity_adapter import FirebaseTokenVerifier, Identity
from adapters.mongo_adapter import MongoStore
from adapters.payment_adapter import StripeGateway
from app.config import settings
from app.exceptions import AppError, ForbiddenError, UnauthorizedError


def get_store(request: Request) -> MongoStore:
    """
    Store handle dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(store: MongoStore = Depends(get_store)):
            # Use store.meals, store.users, ... here
            pass
    """
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_connected:
        raise AppError("Database unavailable", code="STORAGE_UNAVAILABLE")
    return store


def get_payment_gateway(request: Request) -> StripeGateway:
    return request.app.state.payment_gateway


def get_token_verifier(request: Request) -> FirebaseTokenVerifier:
    return request.app.state.token_verifier


def _verify(request: Request, authorization: Optional[str]) -> Identity:
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Unauthorized: Token Missing")
    token = authorization[7:].strip()
    if not token:
        raise UnauthorizedError("Unauthorized: Token Missing")
    identity = get_token_verifier(request).verify(token)
    request.state.identity = identity
    return identity


def require_identity(
    request: Request, authorization: Optional[str] = Header(None)
) -> Identity:
    """Verified caller identity; 401 without a valid bearer token."""
    return _verify(request, authorization)


def get_caller_identity(
    request: Request, authorization: Optional[str] = Header(None)
) -> Optional[Identity]:
    """Verified identity when ``strict_identity`` is on, otherwise None (acting emails are trusted)."""
    if not settings.strict_identity:
        return None
    return _verify(request, authorization)


def assert_actor(identity: Optional[Identity], acting_email: Optional[str]) -> None:
    """In strict mode the acting email named by the client must be the token's email."""
    if identity is None:
        return
    if identity.email.lower() != (acting_email or "").lower():
        raise ForbiddenError("Token identity does not match the acting user")
