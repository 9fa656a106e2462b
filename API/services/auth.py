"""
Authentication service.
Handles restaurant registration and owner login.
"""

import random
import re
import string
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from database.models import AdminUser, Restaurant, SubscriptionStatus
from core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    OwnerClaims,
)


SLUG_SUFFIX_LENGTH = 5


def generate_slug(name: str) -> str:
    """'Café Aroma!' -> 'caf-aroma-k3x9q'"""
    base = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=SLUG_SUFFIX_LENGTH))
    return f"{base}-{suffix}" if base else suffix


class AuthService:
    """Authentication service class."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def email_exists(self, email: str) -> bool:
        return self.db.query(AdminUser).filter(AdminUser.email == email).first() is not None
    
    def slug_exists(self, slug: str) -> bool:
        return self.db.query(Restaurant).filter(Restaurant.slug == slug).first() is not None
    
    def register(
        self,
        restaurant_name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Tuple[AdminUser, Restaurant, str]:
        """
        Create a restaurant and its owner in one transaction.
        
        New restaurants start active with no expiry (grace state) until
        the first payment sets one.
        """
        slug = generate_slug(restaurant_name)
        while self.slug_exists(slug):
            slug = generate_slug(restaurant_name)
        
        restaurant = Restaurant(
            name=restaurant_name,
            slug=slug,
            owner_email=email,
            phone=phone,
            address=address,
            subscription_status=SubscriptionStatus.active.value,
            subscription_expiry=None,
        )
        self.db.add(restaurant)
        self.db.flush()  # Get restaurant.id
        
        user = AdminUser(
            restaurant_id=restaurant.id,
            email=email,
            password_hash=get_password_hash(password),
            role='admin',
        )
        self.db.add(user)
        self.db.commit()
        
        logger.info(f"Restaurant registered: id={restaurant.id} slug={slug}")
        return user, restaurant, self.create_token(user)
    
    def authenticate(self, email: str, password: str) -> Optional[AdminUser]:
        """Return the owner for valid credentials, None otherwise."""
        user = self.db.query(AdminUser).filter(
            AdminUser.email == email,
            AdminUser.is_active == True
        ).first()
        
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user
    
    def create_token(self, user: AdminUser) -> str:
        return create_access_token(OwnerClaims(
            user_id=user.id,
            restaurant_id=user.restaurant_id,
            email=user.email,
            role=user.role,
        ))
