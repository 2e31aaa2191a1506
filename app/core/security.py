"""Security utilities for JWT handling.

Tokens are minted by the external auth provider with a shared secret; this
service only decodes them. ``create_access_token`` exists for local tooling
and tests.
"""

import hashlib
import hmac
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import settings

DEFAULT_ACCESS_TOKEN_TTL = timedelta(minutes=30)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or DEFAULT_ACCESS_TOKEN_TTL)

    to_encode.update(
        {
            "exp": expire,
            "iat": datetime.now(UTC),
            "type": "access",
        }
    )

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded payload or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        # Verify token type
        if payload.get("type") != "access":
            return None

        return payload
    except JWTError:
        return None


def compute_paystack_signature(secret: str, payload: bytes) -> str:
    """Hex HMAC-SHA512 of a webhook body, as Paystack signs it."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha512).hexdigest()


def verify_paystack_signature(secret: str, payload: bytes, signature: str | None) -> bool:
    """Constant-time check of the ``x-paystack-signature`` header."""
    if not secret or not signature:
        return False
    expected = compute_paystack_signature(secret, payload)
    return hmac.compare_digest(expected, signature)
