"""In-app notification schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """Notification row."""

    id: str
    user_id: str
    type: str
    title: str
    body: str
    data: dict[str, Any] | None = None
    channel: str
    status: str
    read_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReadAllResponse(BaseModel):
    """Result of marking every notification read."""

    updated: int
