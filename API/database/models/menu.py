"""
Menu category and menu item models.
All models scoped by restaurant_id.
"""

from sqlalchemy import (
    Column, String, Integer, Boolean, Text, JSON,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ..base import RestaurantBaseModel


class MenuCategory(RestaurantBaseModel):
    """Menu section ("Starters", "Drinks"). Scoped per restaurant."""
    
    __tablename__ = 'menu_categories'
    
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    items = relationship("MenuItem", back_populates="category")
    
    __table_args__ = (
        Index('ix_menu_categories_restaurant_active', 'restaurant_id', 'is_active'),
    )


class MenuItem(RestaurantBaseModel):
    """Dish on the menu. Category is optional (uncategorised items)."""
    
    __tablename__ = 'menu_items'
    
    category_id = Column(
        Integer,
        ForeignKey('menu_categories.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    name = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    
    # Price in minor currency units (paise, cents)
    price_cents = Column(Integer, nullable=False)
    currency = Column(String(3), default='INR', nullable=False)
    photo_url = Column(String(500), nullable=True)
    
    # Flags
    is_available = Column(Boolean, default=True, nullable=False)
    is_vegetarian = Column(Boolean, default=False, nullable=False)
    is_vegan = Column(Boolean, default=False, nullable=False)
    is_gluten_free = Column(Boolean, default=False, nullable=False)
    allergens = Column(JSON, default=list, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    
    # Relationships
    category = relationship("MenuCategory", back_populates="items")
    
    __table_args__ = (
        Index('ix_menu_items_restaurant_available', 'restaurant_id', 'is_available'),
        CheckConstraint('price_cents >= 0', name='ck_menu_item_price_non_negative'),
    )
