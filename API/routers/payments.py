"""
Subscription payments router (manual UPI / net banking flow).
Endpoint: /api/payments/...
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import AdminUser
from core.dependencies import get_current_user
from core.payment_methods import get_all_methods
from schemas.base import ErrorResponse
from schemas.payment import (
    InitiatePaymentRequest,
    InitiatePaymentResponse,
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    PaymentStatusResponse,
)
from services.payments import PaymentService

router = APIRouter()


@router.get("/methods")
async def list_payment_methods():
    """Manual payment methods and where to send money."""
    return {"methods": get_all_methods()}


@router.post(
    "/initiate",
    response_model=InitiatePaymentResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid method or amount"},
        404: {"model": ErrorResponse, "description": "Restaurant not found"},
    },
)
async def initiate_payment(
    body: InitiatePaymentRequest,
    current_user: AdminUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Start a subscription payment.
    Not gated: an expired restaurant must be able to pay.
    """
    service = PaymentService(db)
    return service.initiate(
        restaurant_id=current_user.restaurant_id,
        method=body.payment_method,
        amount_cents=body.amount_cents,
    )


@router.post(
    "/confirm",
    response_model=ConfirmPaymentResponse,
    responses={
        402: {"model": ErrorResponse, "description": "Payment failed"},
        404: {"model": ErrorResponse, "description": "Pending payment not found"},
    },
)
async def confirm_payment(
    body: ConfirmPaymentRequest,
    db: Session = Depends(get_db),
):
    """
    Settle a pending payment (called by the payment provider / operator).
    success -> subscription renewed; anything else -> 402 payment failed.
    
    No owner login: the caller is trusted. Knowing a pending payment_id
    together with its restaurant_id is enough to settle it, so both must
    only reach the operator or provider that verified the transfer.
    Each payment settles at most once.
    """
    service = PaymentService(db)
    return service.confirm(
        payment_id=body.payment_id,
        restaurant_id=body.restaurant_id,
        payment_status=body.payment_status,
        transaction_id=body.transaction_id,
    )


@router.get("/status/{restaurant_id}", response_model=PaymentStatusResponse)
async def get_payment_status(
    restaurant_id: int,
    current_user: AdminUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest payment attempts, newest first. Owner only."""
    if restaurant_id != current_user.restaurant_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )
    
    service = PaymentService(db)
    payments = service.history(restaurant_id)
    return {"payments": payments, "count": len(payments)}
