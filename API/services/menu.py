"""
Menu service - categories and items of one restaurant.

Reads are always allowed; every mutation is reached only through the
access gate (core.dependencies.require_active_subscription).
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import InvalidInputError, NotFoundError
from database.models import MenuCategory, MenuItem, Restaurant
from services.base import RestaurantServiceBase


class MenuService(RestaurantServiceBase):
    """Menu CRUD scoped to self.restaurant_id."""
    
    # ==================== CATEGORIES ====================
    
    def list_categories(self) -> List[MenuCategory]:
        return self._q(MenuCategory).order_by(
            MenuCategory.sort_order, MenuCategory.name
        ).all()
    
    def get_category(self, category_id: int) -> MenuCategory:
        category = self._q(MenuCategory).filter(MenuCategory.id == category_id).first()
        if not category:
            raise NotFoundError("Category not found")
        return category
    
    def create_category(self, data: dict) -> MenuCategory:
        category = MenuCategory(restaurant_id=self.restaurant_id, **data)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category
    
    def update_category(self, category_id: int, data: dict) -> MenuCategory:
        category = self.get_category(category_id)
        if not data:
            raise InvalidInputError("No fields to update")
        
        for key, value in data.items():
            setattr(category, key, value)
        self.db.commit()
        self.db.refresh(category)
        return category
    
    def delete_category(self, category_id: int):
        category = self.get_category(category_id)
        # Items stay on the menu, uncategorised
        for item in self._q(MenuItem).filter(MenuItem.category_id == category.id).all():
            item.category_id = None
        self.db.delete(category)
        self.db.commit()
    
    # ==================== ITEMS ====================
    
    def list_items(self, category_id: Optional[int] = None) -> List[MenuItem]:
        query = self._q(MenuItem)
        if category_id is not None:
            query = query.filter(MenuItem.category_id == category_id)
        return query.order_by(MenuItem.sort_order, MenuItem.name).all()
    
    def get_item(self, item_id: int) -> MenuItem:
        item = self._q(MenuItem).filter(MenuItem.id == item_id).first()
        if not item:
            raise NotFoundError("Menu item not found")
        return item
    
    def create_item(self, data: dict) -> MenuItem:
        self._check_category(data.get("category_id"))
        item = MenuItem(restaurant_id=self.restaurant_id, **data)
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item
    
    def update_item(self, item_id: int, data: dict) -> MenuItem:
        item = self.get_item(item_id)
        if not data:
            raise InvalidInputError("No fields to update")
        if "category_id" in data:
            self._check_category(data["category_id"])
        
        for key, value in data.items():
            setattr(item, key, value)
        self.db.commit()
        self.db.refresh(item)
        return item
    
    def delete_item(self, item_id: int):
        item = self.get_item(item_id)
        self.db.delete(item)
        self.db.commit()
    
    def overview(self, restaurant: Restaurant) -> dict:
        """Owner's menu screen: name, menu card photo and every item, available or not."""
        return {
            "restaurant": {
                "name": restaurant.name,
                "menu_photo_url": restaurant.menu_photo_url,
            },
            "menu_items": [self.item_to_dict(i) for i in self.list_items()],
        }
    
    def set_item_photo(self, item_id: int, photo_url: str) -> MenuItem:
        item = self.get_item(item_id)
        item.photo_url = photo_url
        self.db.commit()
        self.db.refresh(item)
        return item
    
    # ==================== HELPERS ====================
    
    def _check_category(self, category_id: Optional[int]):
        """A category, when given, must belong to the same restaurant."""
        if category_id is None:
            return
        exists = self._q(MenuCategory).filter(MenuCategory.id == category_id).first()
        if not exists:
            raise InvalidInputError("Invalid category")
    
    @staticmethod
    def item_to_dict(item: MenuItem) -> dict:
        return {
            "id": item.id,
            "category_id": item.category_id,
            "name": item.name,
            "description": item.description,
            "price_cents": item.price_cents,
            "currency": item.currency,
            "photo_url": item.photo_url,
            "is_available": item.is_available,
            "is_vegetarian": item.is_vegetarian,
            "is_vegan": item.is_vegan,
            "is_gluten_free": item.is_gluten_free,
            "allergens": item.allergens or [],
            "sort_order": item.sort_order,
        }
