"""Inbound gateway webhooks."""

import json

import structlog
from fastapi import APIRouter, Header, Request

from app.config import settings
from app.core.exceptions import BadRequestException
from app.core.security import verify_paystack_signature
from app.dependencies import DatabaseSession
from app.schemas.payments import WebhookAck
from app.services.payment_service import PaymentService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/paystack", response_model=WebhookAck, summary="Paystack webhook")
async def paystack_webhook(
    request: Request,
    db: DatabaseSession,
    x_paystack_signature: str | None = Header(None),
) -> WebhookAck:
    """
    Receive a Paystack event.

    The HMAC-SHA512 signature is checked against the raw body before
    anything is parsed.

    Raises:
        BadRequestException: Missing or invalid signature, or malformed body
    """
    body = await request.body()
    if not verify_paystack_signature(settings.paystack_secret_key, body, x_paystack_signature):
        logger.warning("paystack_webhook_bad_signature")
        raise BadRequestException("Invalid signature")

    try:
        event = json.loads(body)
    except ValueError as e:
        raise BadRequestException("Malformed webhook payload") from e
    if not isinstance(event, dict):
        raise BadRequestException("Malformed webhook payload")

    processed = await PaymentService(db).handle_webhook(event)
    return WebhookAck(event=processed)
