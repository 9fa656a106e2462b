"""
Database package for the QR menu SaaS API.

Usage:
    from database import db, get_db, init_db
    from database.models import Restaurant, SubscriptionPayment, MenuItem
"""

from .base import Base, BaseModel, RestaurantBaseModel, RestaurantMixin, TimestampMixin, get_utc_now
from .connection import (
    DatabaseConnection,
    db,
    get_db,
    init_db,
    reset_db,
)

# Import all models to ensure they are registered with SQLAlchemy
from .models import *


__all__ = [
    # Base
    'Base',
    'BaseModel',
    'RestaurantBaseModel',
    'RestaurantMixin',
    'TimestampMixin',
    'get_utc_now',
    
    # Connection
    'DatabaseConnection',
    'db',
    'get_db',
    'init_db',
    'reset_db',
]
