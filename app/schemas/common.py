"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    """Pagination block attached to list responses."""

    page: int
    limit: int
    total: int
    has_more: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """Derive ``has_more`` from the page window."""
        return cls(page=page, limit=limit, total=total, has_more=page * limit < total)


class SuccessResponse(BaseModel, Generic[T]):
    """``{"success": true, "data": ...}`` envelope."""

    success: bool = True
    data: T
    message: str | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for list endpoints."""

    success: bool = True
    data: list[T]
    pagination: Pagination


class MessageResponse(BaseModel):
    """Envelope for operations that return no payload."""

    success: bool = True
    message: str
