"""
Payment schemas - manual subscription payment flow.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, StrictInt


class InitiatePaymentRequest(BaseModel):
    payment_method: str                 # upi | netbanking (checked by the service)
    amount_cents: StrictInt             # minor units, >= 1 (checked by the service)


class PaymentInstructions(BaseModel):
    title: str
    steps: List[str]
    note: str
    upi_id: str


class InitiatePaymentResponse(BaseModel):
    message: str
    payment_id: str
    amount: str                         # "₹500.00"
    amount_cents: int
    payment_method: str
    instructions: Optional[PaymentInstructions] = None


class ConfirmPaymentRequest(BaseModel):
    payment_id: str
    restaurant_id: int
    payment_status: str                 # "success" activates, anything else fails
    transaction_id: Optional[str] = None


class ConfirmPaymentResponse(BaseModel):
    message: str
    payment_id: str
    status: str
    expiry: datetime
    days_remaining: int


class PaymentRecordResponse(BaseModel):
    id: int
    payment_id: str
    restaurant_id: int
    amount_cents: int
    amount: str
    currency: str
    payment_method: str
    payment_status: str
    payment_date: datetime
    subscription_expiry: Optional[datetime] = None
    transaction_id: Optional[str] = None


class PaymentStatusResponse(BaseModel):
    payments: List[PaymentRecordResponse]
    count: int
