"""
Restaurant model - the tenant root of the SaaS.
Each restaurant owns its menu, its owner login and its subscription ledger.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, String, Text, DateTime, Index

from ..base import BaseModel


class SubscriptionStatus(str, PyEnum):
    """Subscription status. Closed set - anything else is a bug."""
    active = "active"
    past_due = "past_due"
    canceled = "canceled"
    expired = "expired"
    inactive = "inactive"


class Restaurant(BaseModel):
    """
    Restaurant model - represents a tenant in the SaaS system.
    
    The subscription fields (subscription_status, subscription_expiry) are
    the ledger: the single source of truth for write access. They are only
    written through services.subscription.SubscriptionLedger.
    """
    
    __tablename__ = 'restaurants'
    
    # Basic info
    name = Column(String(300), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)  # "cafe-aroma-k3x9q"
    owner_email = Column(String(255), nullable=False)
    
    # Contact info
    phone = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    menu_photo_url = Column(String(500), nullable=True)
    
    # Subscription ledger
    subscription_status = Column(
        String(20),
        default=SubscriptionStatus.active.value,
        nullable=False
    )
    subscription_expiry = Column(DateTime, nullable=True)  # NULL = grace period after registration
    
    # External billing correlation (payment gateway)
    stripe_customer_id = Column(String(255), nullable=True, index=True)
    stripe_subscription_id = Column(String(255), nullable=True)
    
    __table_args__ = (
        Index('ix_restaurants_subscription_status', 'subscription_status'),
    )
    
    _repr_fields = ("slug", "subscription_status")
    
    @property
    def status(self) -> SubscriptionStatus:
        return SubscriptionStatus(self.subscription_status)
