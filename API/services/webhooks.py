"""
Gateway webhook handling - maps payment gateway events onto the ledger.

Restaurants are correlated by the gateway customer id. Transitions are
plain assignments, so a redelivered event reapplies the same status and
only adds another audit row. Unknown event types are acknowledged and
ignored.
"""

from typing import Callable, Dict, NamedTuple, Optional

from loguru import logger
from sqlalchemy.orm import Session

from database.models import Restaurant, SubscriptionEvent, SubscriptionStatus
from services.subscription import SubscriptionLedger


# Gateway subscription status -> local status; anything else is inactive
GATEWAY_STATUS_MAP: Dict[str, SubscriptionStatus] = {
    "active": SubscriptionStatus.active,
    "past_due": SubscriptionStatus.past_due,
    "canceled": SubscriptionStatus.canceled,
}


def map_gateway_status(gateway_status: Optional[str]) -> SubscriptionStatus:
    if gateway_status in GATEWAY_STATUS_MAP:
        return GATEWAY_STATUS_MAP[gateway_status]
    return SubscriptionStatus.inactive


class WebhookResult(NamedTuple):
    event_type: str
    handled: bool                      # event type is one we map
    restaurant_id: Optional[int]       # None when no restaurant correlates
    status: Optional[SubscriptionStatus]


class GatewayWebhookService:
    def __init__(self, db: Session):
        self.db = db
        self.ledger = SubscriptionLedger(db)
        self._handlers: Dict[str, Callable[[dict, dict], WebhookResult]] = {
            "checkout.session.completed": self._on_checkout_completed,
            "invoice.payment_succeeded": self._on_invoice_succeeded,
            "invoice.payment_failed": self._on_invoice_failed,
            "customer.subscription.updated": self._on_subscription_updated,
            "customer.subscription.deleted": self._on_subscription_deleted,
        }

    def handle(self, event: dict) -> WebhookResult:
        event_type = event.get("type", "")
        logger.info(f"Received gateway webhook: {event_type} ({event.get('id')})")

        handler = self._handlers.get(event_type)
        if handler is None:
            logger.info(f"Unhandled event type: {event_type}")
            return WebhookResult(event_type, False, None, None)

        data = event.get("data")
        obj = data.get("object") if isinstance(data, dict) else None
        if not isinstance(obj, dict):
            # Signed but not shaped like a gateway event: nothing to correlate
            obj = {}
        try:
            result = handler(event, obj)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result

    # ==================== EVENT HANDLERS ====================

    def _on_checkout_completed(self, event: dict, session: dict) -> WebhookResult:
        if session.get("mode") != "subscription":
            logger.info(f"Checkout completed in mode={session.get('mode')}, ignored")
            return WebhookResult(event["type"], True, None, None)

        restaurant = self._apply(event, session, SubscriptionStatus.active)
        if restaurant is not None:
            restaurant.stripe_subscription_id = session.get("subscription")
        return self._result(event, restaurant, SubscriptionStatus.active)

    def _on_invoice_succeeded(self, event: dict, invoice: dict) -> WebhookResult:
        restaurant = self._apply(event, invoice, SubscriptionStatus.active)
        return self._result(event, restaurant, SubscriptionStatus.active)

    def _on_invoice_failed(self, event: dict, invoice: dict) -> WebhookResult:
        restaurant = self._apply(event, invoice, SubscriptionStatus.past_due)
        return self._result(event, restaurant, SubscriptionStatus.past_due)

    def _on_subscription_updated(self, event: dict, subscription: dict) -> WebhookResult:
        status = map_gateway_status(subscription.get("status"))
        restaurant = self._apply(event, subscription, status)
        return self._result(event, restaurant, status)

    def _on_subscription_deleted(self, event: dict, subscription: dict) -> WebhookResult:
        restaurant = self._apply(event, subscription, SubscriptionStatus.canceled)
        return self._result(event, restaurant, SubscriptionStatus.canceled)

    # ==================== HELPERS ====================

    def _apply(self, event: dict, obj: dict, status: SubscriptionStatus) -> Optional[Restaurant]:
        """Set the status of the correlated restaurant and append an audit row."""
        customer_id = obj.get("customer")
        restaurant = self._find_by_customer(customer_id)
        if restaurant is None:
            logger.warning(f"No restaurant for gateway customer {customer_id}, {event['type']} ignored")
            return None

        restaurant = self.ledger.set_status(restaurant.id, status)
        self.db.add(SubscriptionEvent(
            restaurant_id=restaurant.id,
            event_type=event["type"],
            stripe_event_id=event.get("id"),
            data=obj,
        ))
        return restaurant

    def _find_by_customer(self, customer_id: Optional[str]) -> Optional[Restaurant]:
        if not customer_id:
            return None
        return self.db.query(Restaurant).filter(
            Restaurant.stripe_customer_id == customer_id
        ).first()

    def _result(self, event: dict, restaurant: Optional[Restaurant], status: SubscriptionStatus) -> WebhookResult:
        return WebhookResult(
            event["type"],
            True,
            restaurant.id if restaurant is not None else None,
            status if restaurant is not None else None,
        )
