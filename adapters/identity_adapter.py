"""
Bearer token verification for Firebase ID tokens.

Tokens are RS256 JWTs signed with keys Google publishes as a JWKS document.
The verified ``email`` claim becomes the caller identity; nothing downstream
does any cryptography.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from jose import JWTError, jwt

from app.exceptions import UnauthorizedError, UpstreamServiceError

logger = logging.getLogger("hostelmeals.auth")


@dataclass(frozen=True)
class Identity:
    """Caller identity derived from a verified token."""

    email: str
    uid: str
    claims: Dict[str, Any]


class FirebaseTokenVerifier:
    """Validates ID tokens against the provider's JWKS endpoint."""

    def __init__(
        self,
        project_id: Optional[str],
        jwks_url: str,
        *,
        timeout: float = 5.0,
        refresh_interval: int = 3600,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.audience = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}" if project_id else None
        self.jwks_url = jwks_url
        self.refresh_interval = refresh_interval

        self._keys: Optional[List[Dict[str, Any]]] = None
        self._last_refresh: float = 0.0
        self._lock = threading.Lock()
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def verify(self, token: str) -> Identity:
        """Verify ``token`` and return the identity it carries.

        Raises:
            UnauthorizedError: the token is malformed, expired, wrongly signed
                or carries no email
            UpstreamServiceError: the signing keys could not be fetched
        """
        if not self.audience:
            raise UnauthorizedError("Token verification is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise UnauthorizedError("Malformed bearer token") from exc

        kid = header.get("kid")
        if not isinstance(kid, str):
            raise UnauthorizedError("Token header missing key id (kid)")

        key_data = self._get_key(kid)
        if not key_data:
            raise UnauthorizedError("Signing key not found for token", details={"kid": kid})

        try:
            claims = jwt.decode(
                token,
                key_data,
                algorithms=[key_data.get("alg", "RS256")],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            raise UnauthorizedError("Invalid or expired token", details={"error": str(exc)}) from exc

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise UnauthorizedError("Token carries no email claim")

        return Identity(email=email, uid=str(claims.get("sub", "")), claims=claims)

    def _get_key(self, kid: str) -> Optional[Dict[str, Any]]:
        """Return the JWK matching ``kid``, refreshing once if it is unknown (key rotation)."""
        self._refresh_keys(force=False)
        key = self._find(kid)
        if key is None:
            self._refresh_keys(force=True)
            key = self._find(kid)
        return key

    def _find(self, kid: str) -> Optional[Dict[str, Any]]:
        for key in self._keys or []:
            if key.get("kid") == kid:
                return key
        return None

    def _refresh_keys(self, force: bool) -> None:
        with self._lock:
            fresh = time.monotonic() - self._last_refresh < self.refresh_interval
            if self._keys is not None and fresh and not force:
                return
            try:
                response = self._client.get(self.jwks_url)
                response.raise_for_status()
                keys = response.json().get("keys", [])
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("jwks_fetch_failed url=%s error=%s", self.jwks_url, exc)
                raise UpstreamServiceError(
                    "Identity provider unavailable", details={"error": str(exc)}
                ) from exc
            self._keys = keys
            self._last_refresh = time.monotonic()
            logger.info("jwks_refreshed keys=%d", len(keys))
