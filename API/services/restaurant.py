"""
Restaurant service - owner profile, public menu page, menu photo.
"""

import os
import uuid
from typing import Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import InvalidInputError, NotFoundError
from database.models import MenuCategory, MenuItem, Restaurant, SubscriptionStatus
from services.menu import MenuService
from services.payments import PaymentService
from services.subscription import SubscriptionLedger


# Accepted content types and the extension stored files get
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class RestaurantService:
    def __init__(self, db: Session):
        self.db = db
    
    def get_restaurant(self, restaurant_id: int) -> Optional[Restaurant]:
        return self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    
    def get_by_slug(self, slug: str) -> Optional[Restaurant]:
        return self.db.query(Restaurant).filter(Restaurant.slug == slug).first()
    
    def get_profile(self, restaurant_id: int) -> dict:
        """Owner view: details, current (lazily expired) status and payment history."""
        state = SubscriptionLedger(self.db).get_status(restaurant_id)
        restaurant = self.get_restaurant(restaurant_id)
        
        return {
            "restaurant": restaurant,
            "subscription_status": state.status.value,
            "subscription_expiry": state.expiry,
            "is_expired": state.status == SubscriptionStatus.expired,
            "payment_history": PaymentService(self.db).history(restaurant_id, limit=100),
        }
    
    def update_profile(self, restaurant: Restaurant, data: dict) -> Restaurant:
        """Apply the provided fields. Caller has already passed the access gate."""
        if not data:
            raise InvalidInputError("No fields to update", stage="validation")
        
        for key, value in data.items():
            setattr(restaurant, key, value)
        self.db.commit()
        self.db.refresh(restaurant)
        return restaurant
    
    def billing_portal(self, restaurant_id: int) -> dict:
        """Link to the billing page of the frontend, with the current (lazily expired) status."""
        state = SubscriptionLedger(self.db).get_status(restaurant_id)
        query = urlencode({"restaurantId": restaurant_id, "status": state.status.value})
        return {
            "message": "Billing portal session created successfully",
            "billing_portal_url": f"{settings.frontend_url.rstrip('/')}/billing-portal?{query}",
            "subscription_status": state.status.value,
            "subscription_expiry": state.expiry,
        }
    
    def get_public_menu(self, slug: str) -> dict:
        """Customer view behind the QR code. Only restaurants with an active subscription."""
        restaurant = self.get_by_slug(slug)
        if restaurant is None:
            raise NotFoundError("Restaurant not found or inactive", stage="lookup")
        
        state = SubscriptionLedger(self.db).get_status(restaurant.id)
        if state.status != SubscriptionStatus.active:
            raise NotFoundError("Restaurant not found or inactive", stage="lookup")
        
        categories = self.db.query(MenuCategory).filter(
            MenuCategory.restaurant_id == restaurant.id,
            MenuCategory.is_active == True
        ).order_by(MenuCategory.sort_order, MenuCategory.name).all()
        
        items = self.db.query(MenuItem).filter(
            MenuItem.restaurant_id == restaurant.id,
            MenuItem.is_available == True
        ).order_by(MenuItem.sort_order, MenuItem.name).all()
        
        menu = []
        for category in categories:
            menu.append({
                "id": category.id,
                "name": category.name,
                "description": category.description,
                "sort_order": category.sort_order,
                "items": [
                    MenuService.item_to_dict(i) for i in items if i.category_id == category.id
                ],
            })
        
        return {
            "restaurant": {
                "name": restaurant.name,
                "phone": restaurant.phone,
                "address": restaurant.address,
                "logo_url": restaurant.logo_url,
                "menu_photo_url": restaurant.menu_photo_url,
            },
            "menu": menu,
        }
    
    def save_photo(self, folder: str, content_type: str, contents: bytes) -> str:
        """Store an uploaded image under upload_dir/folder and return its public URL."""
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidInputError(
                "Invalid file type. Only JPEG, PNG, and WebP images are allowed.",
                stage="upload",
            )
        if len(contents) > settings.max_upload_size:
            raise InvalidInputError("File is larger than 5MB", stage="upload")
        
        # The client filename is never part of the stored path
        name = f"{uuid.uuid4().hex}.{ALLOWED_IMAGE_TYPES[content_type]}"
        target_dir = os.path.join(settings.upload_dir, folder)
        os.makedirs(target_dir, exist_ok=True)
        
        with open(os.path.join(target_dir, name), "wb") as f:
            f.write(contents)
        
        return f"/uploads/{folder}/{name}"
    
    def set_menu_photo(self, restaurant: Restaurant, photo_url: str) -> Restaurant:
        old = restaurant.menu_photo_url
        restaurant.menu_photo_url = photo_url
        self.db.commit()
        _remove_upload(old)
        return restaurant


def _remove_upload(url: Optional[str]):
    """Delete a previously uploaded file referenced by its /uploads/... URL."""
    if not url or not url.startswith("/uploads/"):
        return
    path = os.path.join(settings.upload_dir, url[len("/uploads/"):])
    if os.path.exists(path):
        os.remove(path)
