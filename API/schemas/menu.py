"""
Menu schemas - categories and items.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from .base import reject_null


class CategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryUpdate(BaseModel):
    """Partial update. Omit a field to keep it; only description may be cleared with null."""
    
    name: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    
    @field_validator("name", "sort_order", "is_active")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class MenuItemCreate(BaseModel):
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price_cents: int = Field(..., ge=0)
    currency: str = Field("INR", min_length=3, max_length=3)
    is_available: bool = True
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    allergens: List[str] = []
    sort_order: int = 0
    
    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Item name is required")
        return v


class MenuItemUpdate(BaseModel):
    """Partial update. Only category_id and description may be cleared with null."""
    
    category_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    is_available: Optional[bool] = None
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    is_gluten_free: Optional[bool] = None
    allergens: Optional[List[str]] = None
    sort_order: Optional[int] = None
    
    @field_validator(
        "name", "price_cents", "currency", "is_available", "is_vegetarian",
        "is_vegan", "is_gluten_free", "allergens", "sort_order",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class MenuItemPublic(BaseModel):
    id: int
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price_cents: int
    currency: str
    photo_url: Optional[str] = None
    is_available: bool
    is_vegetarian: bool
    is_vegan: bool
    is_gluten_free: bool
    allergens: List[str] = []
    sort_order: int
    
    model_config = {"from_attributes": True}


class MenuItemResponse(MenuItemPublic):
    created_at: datetime
    updated_at: datetime


class OwnerMenuRestaurant(BaseModel):
    name: str
    menu_photo_url: Optional[str] = None


class OwnerMenuResponse(BaseModel):
    restaurant: OwnerMenuRestaurant
    menu_items: List[MenuItemPublic]
