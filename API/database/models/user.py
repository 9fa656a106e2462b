"""
Admin user model - restaurant owners who log into the dashboard.
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from ..base import RestaurantBaseModel


class AdminUser(RestaurantBaseModel):
    """Owner login. Email is globally unique (login does not know the restaurant)."""
    
    __tablename__ = 'admin_users'
    
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default='admin', nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    restaurant = relationship("Restaurant", backref="admin_users")
