"""
Adapter tests for the outbound HTTP clients, using httpx.MockTransport.
"""

import base64
import time

import httpx
import pytest
from jose import jwt

from adapters.identity_adapter import FirebaseTokenVerifier
from adapters.payment_adapter import StripeGateway
from app.exceptions import UnauthorizedError, UpstreamServiceError

PROJECT_ID = "hostel-meals-test"
JWKS_URL = "https://keys.example.com/jwks"
SECRET = "a-test-signing-secret-of-reasonable-length"


# =============================================================================
# PAYMENT GATEWAY
# =============================================================================


def test_create_payment_intent_posts_form_and_returns_secret():
    """
    Verifies:
    - Amount, currency and metadata are sent form encoded
    - The secret key is sent as a bearer token
    - The client_secret from the response is returned
    """
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["form"] = dict(httpx.QueryParams(request.content.decode()))
        return httpx.Response(200, json={"id": "pi_1", "client_secret": "pi_1_secret_xyz"})

    gateway = StripeGateway("sk_test_123", transport=httpx.MockTransport(handler))

    secret = gateway.create_payment_intent(2999, {"packageName": "Gold", "userEmail": "b@h.io"})

    assert secret == "pi_1_secret_xyz"
    assert seen["path"] == "/v1/payment_intents"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["form"]["amount"] == "2999"
    assert seen["form"]["currency"] == "usd"
    assert seen["form"]["metadata[packageName]"] == "Gold"
    gateway.close()


def test_processor_rejection_is_upstream_error():
    def handler(request):
        return httpx.Response(402, json={"error": {"message": "Your card was declined."}})

    gateway = StripeGateway("sk_test_123", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamServiceError) as exc_info:
        gateway.create_payment_intent(500, {})
    assert exc_info.value.details["status_code"] == 402
    assert exc_info.value.details["error"] == "Your card was declined."


def test_unreachable_processor_is_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    gateway = StripeGateway("sk_test_123", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamServiceError):
        gateway.create_payment_intent(500, {})


def test_unconfigured_gateway_fails_without_calling_out():
    calls = []
    gateway = StripeGateway("", transport=httpx.MockTransport(lambda r: calls.append(r)))

    with pytest.raises(UpstreamServiceError):
        gateway.create_payment_intent(500, {})
    assert calls == []


# =============================================================================
# TOKEN VERIFIER
# =============================================================================


def _jwks(kid="key-1"):
    k = base64.urlsafe_b64encode(SECRET.encode()).rstrip(b"=").decode()
    return {"keys": [{"kty": "oct", "kid": kid, "alg": "HS256", "k": k}]}


def _token(kid="key-1", **claims):
    now = int(time.time())
    payload = {
        "iss": f"https://securetoken.google.com/{PROJECT_ID}",
        "aud": PROJECT_ID,
        "sub": "uid-123",
        "email": "ravi@hostel.example.com",
        "iat": now,
        "exp": now + 3600,
    }
    payload.update(claims)
    return jwt.encode(payload, SECRET, algorithm="HS256", headers={"kid": kid})


def _verifier(jwks=None, counter=None):
    def handler(request):
        if counter is not None:
            counter.append(request.url)
        return httpx.Response(200, json=jwks or _jwks())

    return FirebaseTokenVerifier(PROJECT_ID, JWKS_URL, transport=httpx.MockTransport(handler))


def test_valid_token_yields_email_identity():
    fetches = []
    verifier = _verifier(counter=fetches)

    identity = verifier.verify(_token())
    verifier.verify(_token())

    assert identity.email == "ravi@hostel.example.com"
    assert identity.uid == "uid-123"
    assert len(fetches) == 1


def test_expired_token_is_unauthorized():
    verifier = _verifier()
    with pytest.raises(UnauthorizedError):
        verifier.verify(_token(exp=int(time.time()) - 10))


def test_wrong_audience_is_unauthorized():
    verifier = _verifier()
    with pytest.raises(UnauthorizedError):
        verifier.verify(_token(aud="another-project"))


def test_unknown_kid_refreshes_once_then_fails():
    fetches = []
    verifier = _verifier(counter=fetches)

    with pytest.raises(UnauthorizedError):
        verifier.verify(_token(kid="rotated-away"))
    assert len(fetches) == 2


def test_token_without_email_is_unauthorized():
    verifier = _verifier()
    with pytest.raises(UnauthorizedError):
        verifier.verify(_token(email=None))


def test_malformed_token_is_unauthorized():
    with pytest.raises(UnauthorizedError):
        _verifier().verify("not.a.jwt")


def test_unconfigured_verifier_rejects_everything():
    verifier = FirebaseTokenVerifier(None, JWKS_URL)
    with pytest.raises(UnauthorizedError):
        verifier.verify(_token())


def test_jwks_outage_is_upstream_error():
    verifier = FirebaseTokenVerifier(
        PROJECT_ID, JWKS_URL, transport=httpx.MockTransport(lambda r: httpx.Response(503))
    )
    with pytest.raises(UpstreamServiceError):
        verifier.verify(_token())
