"""
FastAPI dependencies for authentication and the subscription access gate.

Failure modes stay distinct for the client:
- 401: not logged in / token invalid
- 403: logged in, but acting on another restaurant
- 402: logged in, subscription not active (SubscriptionInactiveError)
"""

from typing import Optional
from fastapi import Depends, HTTPException, status, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from database.models import AdminUser, Restaurant
from services.subscription import SubscriptionLedger, is_write_allowed
from .exceptions import SubscriptionInactiveError
from .security import verify_access_token


# HTTP Bearer token scheme (missing header handled below as 401)
security = HTTPBearer(auto_error=False)


# ==================== OWNER AUTH ====================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> AdminUser:
    """Validate the bearer token and load the restaurant owner."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Access token required",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    if credentials is None:
        raise credentials_exception
    
    claims = verify_access_token(credentials.credentials)
    if claims is None:
        credentials_exception.detail = "Invalid or expired token"
        raise credentials_exception
    
    user = db.query(AdminUser).filter(
        AdminUser.id == claims.user_id,
        AdminUser.restaurant_id == claims.restaurant_id,
        AdminUser.is_active == True
    ).first()
    
    if user is None:
        raise credentials_exception
    
    return user


async def get_current_restaurant(
    current_user: AdminUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Restaurant:
    """Restaurant of the logged-in owner."""
    restaurant = db.query(Restaurant).filter(
        Restaurant.id == current_user.restaurant_id
    ).first()
    
    if restaurant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Restaurant not found"
        )
    
    return restaurant


# ==================== ACCESS GATE ====================

async def require_active_subscription(
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db)
) -> Restaurant:
    """
    Gate for every mutating endpoint.
    
    Runs the ledger's lazy expiry check first, so a subscription that ran
    out since the last request is denied here.
    
    Usage:
        @router.post("/categories")
        async def create(restaurant: Restaurant = Depends(require_active_subscription)): ...
    """
    state = SubscriptionLedger(db).get_status(restaurant.id)
    
    if not is_write_allowed(state):
        raise SubscriptionInactiveError(
            "Your subscription is not active. Please renew to continue.",
            stage="access",
            subscription_status=state.status.value,
            subscription_expiry=state.expiry.isoformat() if state.expiry else None,
        )
    
    return restaurant


# ==================== PUBLIC ====================

async def resolve_restaurant_by_slug(
    slug: str = Path(..., description="Restaurant slug (URL identifier)"),
    db: Session = Depends(get_db)
) -> Restaurant:
    restaurant = db.query(Restaurant).filter(Restaurant.slug == slug).first()
    
    if restaurant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Restaurant not found"
        )
    
    return restaurant
