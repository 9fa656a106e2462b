"""
Subscription ledger - the authoritative status/expiry of each restaurant.

Every access-control decision reads through SubscriptionLedger.get_status,
which demotes an active subscription to expired once its expiry has passed
(no background job). Renewals go through SubscriptionLedger.extend, which
runs the extension policy as an atomic read-compute-write per restaurant.
"""

import math
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from loguru import logger
from sqlalchemy import update
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConcurrentUpdateError, NotFoundError
from database.base import get_utc_now
from database.models import Restaurant, SubscriptionStatus


# Attempts for the compare-and-set loop in extend()
MAX_EXTEND_ATTEMPTS = 5


class LedgerState(NamedTuple):
    status: SubscriptionStatus
    expiry: Optional[datetime]


# ==================== PURE POLICY ====================

def compute_extended_expiry(
    current_expiry: Optional[datetime],
    now: datetime,
    period_days: int = 30,
) -> datetime:
    """
    Extension policy.
    
    Unexpired time is kept: renewing early stacks the new period onto the
    current expiry. Otherwise the period starts now.
    """
    period = timedelta(days=period_days)
    if current_expiry is not None and current_expiry > now:
        return current_expiry + period
    return now + period


def days_remaining(expiry: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole days left, rounded up. None when there is no expiry."""
    if expiry is None:
        return None
    return math.ceil((expiry - now).total_seconds() / 86400)


def is_write_allowed(subject) -> bool:
    """
    Access gate.
    
    `subject` is anything with a `.status` (Restaurant or LedgerState).
    Call it only after get_status() ran for the current request.
    """
    return SubscriptionStatus(subject.status) == SubscriptionStatus.active


# ==================== LEDGER ====================

class SubscriptionLedger:
    """Reads and writes restaurant subscription fields."""
    
    def __init__(self, db: Session, period_days: int = None):
        self.db = db
        self.period_days = period_days or settings.subscription_period_days
    
    def _get_restaurant(self, restaurant_id: int, lock: bool = False) -> Restaurant:
        query = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id)
        if lock:
            query = query.with_for_update()
        restaurant = query.populate_existing().first()
        if not restaurant:
            raise NotFoundError("Restaurant not found", stage="lookup")
        return restaurant
    
    def get_status(self, restaurant_id: int, now: datetime = None) -> LedgerState:
        """
        Current status and expiry.
        
        An active subscription whose expiry is in the past is moved to
        expired and the change is committed before returning.
        """
        now = now or get_utc_now()
        restaurant = self._get_restaurant(restaurant_id)
        
        expiry = restaurant.subscription_expiry
        if (
            restaurant.subscription_status == SubscriptionStatus.active.value
            and expiry is not None
            and expiry < now
        ):
            restaurant.subscription_status = SubscriptionStatus.expired.value
            self.db.commit()
            logger.info(
                f"Subscription expired: restaurant={restaurant_id} expiry={expiry.isoformat()}"
            )
        
        return LedgerState(SubscriptionStatus(restaurant.subscription_status), expiry)
    
    def set_active(self, restaurant_id: int, new_expiry: Optional[datetime]) -> Restaurant:
        """
        status=active, expiry=new_expiry.
        Does NOT commit - caller must commit.
        """
        restaurant = self._get_restaurant(restaurant_id, lock=True)
        old = restaurant.subscription_status
        restaurant.subscription_status = SubscriptionStatus.active.value
        restaurant.subscription_expiry = new_expiry
        restaurant.updated_at = get_utc_now()
        logger.info(f"Ledger: restaurant={restaurant_id} {old} -> active, expiry={new_expiry}")
        return restaurant
    
    def set_status(self, restaurant_id: int, status: SubscriptionStatus) -> Restaurant:
        """
        Status only, expiry untouched.
        Does NOT commit - caller must commit.
        """
        restaurant = self._get_restaurant(restaurant_id, lock=True)
        old = restaurant.subscription_status
        restaurant.subscription_status = SubscriptionStatus(status).value
        restaurant.updated_at = get_utc_now()
        logger.info(f"Ledger: restaurant={restaurant.id} {old} -> {restaurant.subscription_status}")
        return restaurant
    
    def extend(self, restaurant_id: int, now: datetime = None) -> datetime:
        """
        Apply the extension policy and activate the subscription.
        
        The expiry is written with a compare-and-set on the value that was
        read, so a concurrent renewal of the same restaurant makes this one
        re-read and stack on top instead of overwriting it.
        Does NOT commit - caller must commit.
        """
        now = now or get_utc_now()
        
        for attempt in range(1, MAX_EXTEND_ATTEMPTS + 1):
            observed = self._read_expiry(restaurant_id)
            new_expiry = compute_extended_expiry(observed, now, self.period_days)
            
            if self._compare_and_set_expiry(restaurant_id, observed, new_expiry):
                logger.info(
                    f"Ledger: restaurant={restaurant_id} extended "
                    f"{observed} -> {new_expiry} (attempt {attempt})"
                )
                return new_expiry
            
            logger.warning(
                f"Ledger: expiry changed during renewal of restaurant={restaurant_id}, retrying"
            )
        
        raise ConcurrentUpdateError(
            "Subscription was modified concurrently, please retry",
            stage="confirmation",
        )
    
    # ==================== HELPERS ====================
    
    def _read_expiry(self, restaurant_id: int) -> Optional[datetime]:
        row = self.db.query(Restaurant.subscription_expiry).filter(
            Restaurant.id == restaurant_id
        ).with_for_update().first()
        if row is None:
            raise NotFoundError("Restaurant not found", stage="confirmation")
        return row[0]
    
    def _compare_and_set_expiry(
        self,
        restaurant_id: int,
        expected: Optional[datetime],
        new_expiry: datetime,
    ) -> bool:
        if expected is None:
            unchanged = Restaurant.subscription_expiry.is_(None)
        else:
            unchanged = Restaurant.subscription_expiry == expected
        
        result = self.db.execute(
            update(Restaurant)
            .where(Restaurant.id == restaurant_id, unchanged)
            .values(
                subscription_status=SubscriptionStatus.active.value,
                subscription_expiry=new_expiry,
                updated_at=get_utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        
        # Loaded instances still hold the old values
        cached = self.db.get(Restaurant, restaurant_id)
        if cached is not None:
            self.db.expire(cached)
        return True
