"""
Domain errors.

Each error carries the HTTP status it maps to and the stage that failed,
so clients can tell "payment failed" from "log in again" from "renew".
Handled centrally in app.py.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that reach the client as a structured body."""
    
    status_code = 500
    default_stage = "server"
    
    def __init__(self, message: str, stage: Optional[str] = None, **extra):
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.extra = extra
    
    def to_dict(self) -> dict:
        body = {
            "success": False,
            "message": self.message,
            "stage": self.stage,
        }
        body.update(self.extra)
        return body


class NotFoundError(AppError):
    """Restaurant, payment or menu row does not exist for the given key."""
    status_code = 404
    default_stage = "lookup"


class InvalidInputError(AppError):
    """Malformed amount, method or other input. Caller must fix and resubmit."""
    status_code = 400
    default_stage = "validation"


class PaymentDeniedError(AppError):
    """Confirmation reported a failed payment. User must initiate again."""
    status_code = 402
    default_stage = "confirmation"


class SubscriptionInactiveError(AppError):
    """Access gate denial: logged in, but the subscription is not active."""
    status_code = 402
    default_stage = "access"


class WebhookSignatureError(AppError):
    """Gateway webhook failed signature verification."""
    status_code = 400
    default_stage = "webhook"


class ConcurrentUpdateError(AppError):
    """Ledger row kept changing underneath a read-modify-write."""
    status_code = 409
    default_stage = "confirmation"
