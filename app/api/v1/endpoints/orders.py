"""Pharmacy order endpoints."""

from fastapi import APIRouter, Query, status

from app.dependencies import AdminUser, CurrentUser, DatabaseSession, PatientUser
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.orders import OrderCreate, OrderResponse, OrderStatusUpdate
from app.services.order_service import OrderService

router = APIRouter()


@router.post(
    "/",
    response_model=SuccessResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
)
async def create_order(
    data: OrderCreate,
    current_user: PatientUser,
    db: DatabaseSession,
) -> SuccessResponse[OrderResponse]:
    """
    Create an order awaiting payment.

    Args:
        data: Items, delivery address and optional prescription
        current_user: Authenticated patient
        db: Database session

    Returns:
        Order with computed subtotal, delivery fee and total
    """
    order = await OrderService(db).create(current_user["id"], data)
    return SuccessResponse(data=order, message="Order created")


@router.get("/my", response_model=PaginatedResponse[OrderResponse], summary="List my orders")
async def list_my_orders(
    current_user: CurrentUser,
    db: DatabaseSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[OrderResponse]:
    """List the caller's orders, newest first."""
    items, pagination = await OrderService(db).list_own(current_user["id"], page, limit)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get("/{order_id}", response_model=SuccessResponse[OrderResponse], summary="Get order")
async def get_order(
    order_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[OrderResponse]:
    """Get an order with its items."""
    return SuccessResponse(data=await OrderService(db).get(order_id, current_user))


@router.patch(
    "/{order_id}/status",
    response_model=SuccessResponse[OrderResponse],
    summary="Update order status",
)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    current_user: AdminUser,
    db: DatabaseSession,
) -> SuccessResponse[OrderResponse]:
    """
    Move an order along its lifecycle.

    Raises:
        ConflictException: Transition not allowed from the current status
    """
    order = await OrderService(db).update_status(order_id, data.status)
    return SuccessResponse(data=order, message="Order updated")


@router.post(
    "/{order_id}/cancel",
    response_model=SuccessResponse[OrderResponse],
    summary="Cancel order",
)
async def cancel_order(
    order_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[OrderResponse]:
    """Cancel one of the caller's orders before dispatch."""
    order = await OrderService(db).cancel(order_id, current_user["id"])
    return SuccessResponse(data=order, message="Order cancelled")
