"""
Subscription billing models - payment attempts and gateway audit events.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, DateTime, JSON, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ..base import RestaurantBaseModel, get_utc_now


class PaymentMethod(str, PyEnum):
    """How a subscription payment was made."""
    upi = "upi"
    netbanking = "netbanking"
    gateway = "gateway"  # driven by the external payment gateway


class PaymentStatus(str, PyEnum):
    """Payment attempt lifecycle: pending -> success | failed (terminal)."""
    pending = "pending"
    success = "success"
    failed = "failed"


class SubscriptionPayment(RestaurantBaseModel):
    """
    One subscription payment attempt.
    
    Created as pending on initiation; moved once to success or failed on
    confirmation; never touched again and never deleted.
    """
    
    __tablename__ = 'subscription_payments'
    
    # Public identifier returned to the client at initiation
    payment_ref = Column(String(64), unique=True, nullable=False, index=True)
    
    amount_cents = Column(Integer, nullable=False)
    currency = Column(String(3), default='INR', nullable=False)
    payment_method = Column(String(20), nullable=False)
    payment_status = Column(String(20), default=PaymentStatus.pending.value, nullable=False)
    payment_date = Column(DateTime, default=get_utc_now, nullable=False)
    
    # Provisional at initiation, authoritative once status is success
    subscription_expiry = Column(DateTime, nullable=True)
    
    # Reference reported by the payer / bank on confirmation
    transaction_id = Column(String(255), nullable=True)
    
    # Relationships
    restaurant = relationship("Restaurant", backref="payments")
    
    __table_args__ = (
        Index('ix_subscription_payments_restaurant_status', 'restaurant_id', 'payment_status'),
        CheckConstraint('amount_cents > 0', name='ck_subscription_payment_amount_positive'),
    )


class SubscriptionEvent(RestaurantBaseModel):
    """Append-only audit row for every gateway-driven ledger transition."""
    
    __tablename__ = 'subscription_events'
    
    event_type = Column(String(100), nullable=False)
    stripe_event_id = Column(String(255), nullable=True, index=True)  # not unique: redeliveries repeat
    data = Column(JSON, nullable=True)
