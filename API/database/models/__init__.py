"""
Database models package.
Export all models for easy importing.
"""

# Restaurant (MUST be imported first - other models depend on it)
from .restaurant import (
    Restaurant,
    SubscriptionStatus,
)

# Owner authentication
from .user import (
    AdminUser,
)

# Menu
from .menu import (
    MenuCategory,
    MenuItem,
)

# Subscription billing
from .billing import (
    PaymentMethod,
    PaymentStatus,
    SubscriptionPayment,
    SubscriptionEvent,
)


__all__ = [
    'Restaurant',
    'SubscriptionStatus',
    'AdminUser',
    'MenuCategory',
    'MenuItem',
    'PaymentMethod',
    'PaymentStatus',
    'SubscriptionPayment',
    'SubscriptionEvent',
]
