"""Payment endpoints."""

from fastapi import APIRouter, Query, Request

from app.dependencies import AdminUser, CurrentUser, DatabaseSession, Paystack
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.schemas.payments import PaymentInitialize, PaymentInitializeResponse, PaymentResponse
from app.services.payment_service import PaymentService

router = APIRouter()


@router.post(
    "/initialize",
    response_model=SuccessResponse[PaymentInitializeResponse],
    summary="Start a payment",
)
async def initialize_payment(
    data: PaymentInitialize,
    current_user: CurrentUser,
    db: DatabaseSession,
    paystack: Paystack,
) -> SuccessResponse[PaymentInitializeResponse]:
    """
    Open a Paystack checkout for an appointment or order awaiting payment.

    The amount is always taken from the server-side record.

    Args:
        data: Target and payment method
        current_user: Authenticated user
        db: Database session
        paystack: Gateway client

    Returns:
        Reference and authorization URL to redirect the payer to

    Raises:
        NotFoundException: Unknown target
        ForbiddenException: Target belongs to someone else
        BadRequestException: Target is not awaiting payment
        ExternalServiceException: Gateway error
    """
    result = await PaymentService(db, paystack).initialize(current_user, data)
    return SuccessResponse(data=result)


@router.get(
    "/verify/{reference}",
    response_model=SuccessResponse[PaymentResponse],
    summary="Verify a payment",
)
async def verify_payment(
    reference: str,
    current_user: CurrentUser,
    db: DatabaseSession,
    paystack: Paystack,
) -> SuccessResponse[PaymentResponse]:
    """Re-check a payment with the gateway after the checkout redirect."""
    payment = await PaymentService(db, paystack).verify(reference, current_user)
    return SuccessResponse(data=payment)


@router.get(
    "/my",
    response_model=PaginatedResponse[PaymentResponse],
    summary="List my payments",
)
async def list_my_payments(
    current_user: CurrentUser,
    db: DatabaseSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[PaymentResponse]:
    """List the caller's payments, newest first."""
    items, pagination = await PaymentService(db).list_own(current_user["id"], page, limit)
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/{payment_id}",
    response_model=SuccessResponse[PaymentResponse],
    summary="Get payment by ID",
)
async def get_payment(
    payment_id: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> SuccessResponse[PaymentResponse]:
    """Get one of the caller's payments."""
    return SuccessResponse(data=await PaymentService(db).get(payment_id, current_user))


@router.post(
    "/{payment_id}/refund",
    response_model=SuccessResponse[PaymentResponse],
    summary="Refund a payment",
)
async def refund_payment(
    payment_id: str,
    request: Request,
    current_user: AdminUser,
    db: DatabaseSession,
    paystack: Paystack,
) -> SuccessResponse[PaymentResponse]:
    """
    Refund a completed payment in full.

    Raises:
        ConflictException: Payment is not completed
        ExternalServiceException: Gateway refused the refund
    """
    payment = await PaymentService(db, paystack).refund(payment_id, current_user, request)
    return SuccessResponse(data=payment, message="Payment refunded")
