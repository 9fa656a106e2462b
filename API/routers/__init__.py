from .auth import router as auth_router
from .restaurants import router as restaurants_router
from .menu import router as menu_router
from .payments import router as payments_router
from .webhooks import router as webhooks_router

__all__ = [
    'auth_router',
    'restaurants_router',
    'menu_router',
    'payments_router',
    'webhooks_router',
]
