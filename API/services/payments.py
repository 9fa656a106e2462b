"""
Payment service - manual (UPI / net banking) subscription payments.

initiate() records a pending attempt and returns payment instructions.
confirm() settles that exact attempt: success renews the subscription via
the ledger, anything else marks the attempt failed and leaves the ledger
alone.
"""

import secrets
import time
from datetime import timedelta
from typing import Optional

from loguru import logger
from sqlalchemy import update
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import InvalidInputError, NotFoundError, PaymentDeniedError
from core.payment_methods import MANUAL_METHODS, format_amount, get_payment_instructions
from database.base import get_utc_now
from database.models import PaymentStatus, Restaurant, SubscriptionPayment, SubscriptionStatus
from services.subscription import SubscriptionLedger, days_remaining


def generate_payment_id() -> str:
    """PAY_<unix ms>_<9 random chars>"""
    return f"PAY_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class PaymentService:
    def __init__(self, db: Session):
        self.db = db
        self.ledger = SubscriptionLedger(db)

    # ==================== INITIATE ====================

    def initiate(self, restaurant_id: int, method: str, amount_cents: int) -> dict:
        if method not in MANUAL_METHODS:
            raise InvalidInputError(
                f"Unsupported payment method: {method}",
                stage="initiation",
            )
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents < 1:
            raise InvalidInputError(
                "Amount must be a positive integer in minor currency units",
                stage="initiation",
            )

        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if not restaurant:
            raise NotFoundError("Restaurant not found", stage="initiation")

        now = get_utc_now()
        payment = SubscriptionPayment(
            restaurant_id=restaurant_id,
            payment_ref=generate_payment_id(),
            amount_cents=amount_cents,
            currency=settings.currency,
            payment_method=method,
            payment_status=PaymentStatus.pending.value,
            payment_date=now,
            # Informational only; the real expiry is computed on confirmation
            subscription_expiry=now + timedelta(days=settings.subscription_period_days),
        )
        self.db.add(payment)
        self.db.commit()

        logger.info(
            f"Payment initiated: restaurant={restaurant_id} payment={payment.payment_ref} "
            f"method={method} amount={amount_cents}"
        )

        return {
            "message": "Payment initiated successfully",
            "payment_id": payment.payment_ref,
            "amount": format_amount(amount_cents, settings.currency),
            "amount_cents": amount_cents,
            "payment_method": method,
            "instructions": get_payment_instructions(method, amount_cents, settings.currency),
        }

    # ==================== CONFIRM ====================

    def confirm(
        self,
        payment_id: str,
        restaurant_id: int,
        payment_status: str,
        transaction_id: Optional[str] = None,
    ) -> dict:
        """
        Settle a pending payment.

        Raises NotFoundError if the payment is unknown or already settled,
        PaymentDeniedError (after recording the failure) if the payer
        reports anything other than success.
        """
        payment = self.db.query(SubscriptionPayment).filter(
            SubscriptionPayment.payment_ref == payment_id,
            SubscriptionPayment.restaurant_id == restaurant_id,
        ).first()
        if not payment or payment.payment_status != PaymentStatus.pending.value:
            raise NotFoundError("Pending payment not found", stage="confirmation")

        if payment_status == PaymentStatus.success.value:
            return self._settle_success(payment, transaction_id)

        self._claim(payment, PaymentStatus.failed, transaction_id)
        self.db.commit()
        logger.info(f"Payment failed: restaurant={restaurant_id} payment={payment_id}")

        raise PaymentDeniedError(
            "Payment failed",
            stage="confirmation",
            payment_status=PaymentStatus.failed.value,
            payment_id=payment_id,
        )

    def _settle_success(self, payment: SubscriptionPayment, transaction_id: Optional[str]) -> dict:
        now = get_utc_now()
        try:
            self._claim(payment, PaymentStatus.success, transaction_id)
            new_expiry = self.ledger.extend(payment.restaurant_id, now=now)
            self.db.execute(
                update(SubscriptionPayment)
                .where(SubscriptionPayment.id == payment.id)
                .values(subscription_expiry=new_expiry)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.expire(payment)
        logger.info(
            f"Payment confirmed: restaurant={payment.restaurant_id} payment={payment.payment_ref} "
            f"expiry={new_expiry.isoformat()}"
        )

        return {
            "message": "Payment confirmed successfully",
            "payment_id": payment.payment_ref,
            "status": SubscriptionStatus.active.value,
            "expiry": new_expiry,
            "days_remaining": days_remaining(new_expiry, now),
        }

    def _claim(
        self,
        payment: SubscriptionPayment,
        status: PaymentStatus,
        transaction_id: Optional[str],
    ):
        """Move pending -> status exactly once; a second confirmation finds nothing."""
        result = self.db.execute(
            update(SubscriptionPayment)
            .where(
                SubscriptionPayment.id == payment.id,
                SubscriptionPayment.payment_status == PaymentStatus.pending.value,
            )
            .values(
                payment_status=status.value,
                transaction_id=transaction_id,
                updated_at=get_utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise NotFoundError("Pending payment not found", stage="confirmation")

    # ==================== QUERIES ====================

    def history(self, restaurant_id: int, limit: int = None) -> list:
        """Most recent payment attempts, newest first."""
        limit = limit or settings.payment_history_limit
        payments = self.db.query(SubscriptionPayment).filter(
            SubscriptionPayment.restaurant_id == restaurant_id
        ).order_by(
            SubscriptionPayment.payment_date.desc(),
            SubscriptionPayment.id.desc(),
        ).limit(limit).all()
        return [self._to_dict(p) for p in payments]

    # ==================== HELPERS ====================

    def _to_dict(self, p: SubscriptionPayment) -> dict:
        return {
            "id": p.id,
            "payment_id": p.payment_ref,
            "restaurant_id": p.restaurant_id,
            "amount_cents": p.amount_cents,
            "amount": format_amount(p.amount_cents, p.currency),
            "currency": p.currency,
            "payment_method": p.payment_method,
            "payment_status": p.payment_status,
            "payment_date": p.payment_date,
            "subscription_expiry": p.subscription_expiry,
            "transaction_id": p.transaction_id,
        }
