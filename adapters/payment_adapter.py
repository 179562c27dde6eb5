"""
Payment processor client (Stripe REST API).
"""

from typing import Dict, Optional
import logging

import httpx

from app.exceptions import UpstreamServiceError

logger = logging.getLogger("hostelmeals.payments.gateway")


class StripeGateway:
    """Creates payment intents and hands back the client confirmation secret."""

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com",
        currency: str = "usd",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.currency = currency
        self._client = httpx.Client(base_url=api_base, timeout=timeout, transport=transport)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def create_payment_intent(self, amount: int, metadata: Dict[str, str]) -> str:
        """Create a payment intent for ``amount`` minor currency units.

        Returns:
            The intent's client_secret, used by the browser to confirm the payment

        Raises:
            UpstreamServiceError: the processor is unconfigured, unreachable or refused
        """
        if not self.secret_key:
            raise UpstreamServiceError("Payment processor is not configured")

        form = {"amount": str(amount), "currency": self.currency}
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value

        try:
            response = self._client.post(
                "/v1/payment_intents",
                data=form,
                headers={"Authorization": f"Bearer {self.secret_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("payment_intent_http_error error=%s", e)
            raise UpstreamServiceError(
                "Payment processor unavailable", details={"http_error": str(e)}
            ) from e

        if response.status_code >= 400:
            try:
                error = response.json().get("error", {}).get("message")
            except ValueError:
                error = response.text
            logger.error(
                "payment_intent_rejected status=%s error=%s", response.status_code, error
            )
            raise UpstreamServiceError(
                "Payment processor error",
                details={"status_code": response.status_code, "error": error},
            )

        client_secret = response.json().get("client_secret")
        if not client_secret:
            raise UpstreamServiceError("Payment processor returned no client secret")
        logger.info("payment_intent_created amount=%s currency=%s", amount, self.currency)
        return client_secret
