"""Paystack API client (M-Pesa and card payments)."""

from collections.abc import AsyncGenerator
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx
import structlog

from app.config import settings
from app.core.exceptions import ExternalServiceException

logger = structlog.get_logger(__name__)

# Paystack channel names per customer-facing method
CHANNELS = {
    "mpesa": ["mobile_money"],
    "card": ["card"],
}


def to_subunit(amount: Decimal | float) -> int:
    """Convert a major-unit amount to the smallest currency unit."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_subunit(amount: int) -> Decimal:
    """Convert a smallest-unit amount back to major units."""
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


class PaystackClient:
    """Thin async wrapper over the Paystack REST API."""

    def __init__(self, http_client: httpx.AsyncClient):
        """Initialize with a configured HTTP client."""
        self.http = http_client

    async def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            response = await self.http.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.error("paystack_unreachable", path=path, error=str(e))
            raise ExternalServiceException("Payment provider is unavailable") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400 or not body.get("status", False):
            logger.error(
                "paystack_request_failed",
                path=path,
                status_code=response.status_code,
                message=body.get("message"),
            )
            raise ExternalServiceException(
                f"Payment provider error: {body.get('message') or response.reason_phrase}"
            )
        return body

    async def initialize_transaction(
        self,
        email: str,
        amount: Decimal,
        reference: str,
        method: str,
        currency: str | None = None,
        callback_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Start a checkout.

        Returns:
            ``data`` block with ``authorization_url``, ``access_code`` and ``reference``
        """
        body = await self._request(
            "POST",
            "/transaction/initialize",
            {
                "email": email,
                "amount": to_subunit(amount),
                "currency": currency or settings.payment_currency,
                "reference": reference,
                "callback_url": callback_url,
                "channels": CHANNELS.get(method),
                "metadata": metadata or {},
            },
        )
        return body["data"]

    async def verify_transaction(self, reference: str) -> dict[str, Any]:
        """Fetch the outcome of a transaction by reference."""
        body = await self._request("GET", f"/transaction/verify/{reference}")
        return body["data"]

    async def refund(
        self,
        reference: str,
        amount: Decimal | None = None,
        merchant_note: str | None = None,
    ) -> dict[str, Any]:
        """Refund a completed transaction, fully unless ``amount`` is given."""
        payload: dict[str, Any] = {"transaction": reference}
        if amount is not None:
            payload["amount"] = to_subunit(amount)
        if merchant_note:
            payload["merchant_note"] = merchant_note
        body = await self._request("POST", "/refund", payload)
        return body["data"]


async def get_paystack_client() -> AsyncGenerator[PaystackClient, None]:
    """Dependency yielding a Paystack client bound to the configured account."""
    async with httpx.AsyncClient(
        base_url=settings.paystack_base_url,
        timeout=settings.paystack_timeout_seconds,
        headers={
            "Authorization": f"Bearer {settings.paystack_secret_key}",
            "Content-Type": "application/json",
        },
    ) as http_client:
        yield PaystackClient(http_client)
