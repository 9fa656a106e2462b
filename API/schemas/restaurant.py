"""
Restaurant schemas - owner profile and public menu.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, field_validator

from .base import reject_null
from .menu import MenuItemPublic
from .payment import PaymentRecordResponse


class RestaurantUpdate(BaseModel):
    """Update restaurant info. Only provided fields change."""
    
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        # Omit the field to keep the name; null would blank a NOT NULL column
        v = reject_null(v).strip()
        if len(v) < 2:
            raise ValueError("Restaurant name must be at least 2 characters")
        return v


class RestaurantResponse(BaseModel):
    id: int
    name: str
    slug: str
    owner_email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    menu_photo_url: Optional[str] = None
    subscription_status: str
    subscription_expiry: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class RestaurantProfileResponse(BaseModel):
    restaurant: RestaurantResponse
    subscription_status: str
    subscription_expiry: Optional[datetime] = None
    is_expired: bool
    payment_history: List[PaymentRecordResponse]


class PublicRestaurantInfo(BaseModel):
    """Only what a diner needs - no owner or billing data."""
    
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    menu_photo_url: Optional[str] = None


class PublicCategory(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    sort_order: int
    items: List[MenuItemPublic]


class PublicMenuResponse(BaseModel):
    restaurant: PublicRestaurantInfo
    menu: List[PublicCategory]


class BillingPortalResponse(BaseModel):
    message: str
    billing_portal_url: str
    subscription_status: str
    subscription_expiry: Optional[datetime] = None
