"""Video room identifiers and join tokens.

The video SDK is external; rooms are named locally and join tokens are
short-lived JWTs the SDK gateway trusts.
"""

from datetime import UTC, datetime, timedelta

from jose import jwt

from app.config import settings

JOIN_TOKEN_TTL = timedelta(hours=2)


def create_room_id(appointment_id: str) -> str:
    """Stable room name for an appointment."""
    return f"{settings.video_room_prefix}-{appointment_id}"


def create_join_token(room_id: str, user_id: str, role: str) -> str:
    """Per-participant token for joining a room."""
    now = datetime.now(UTC)
    return jwt.encode(
        {
            "sub": user_id,
            "room_id": room_id,
            "role": role,
            "iat": now,
            "exp": now + JOIN_TOKEN_TTL,
            "type": "video",
        },
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
