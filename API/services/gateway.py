"""
Payment gateway (Stripe) webhook verification.

Only the signature check lives here; the event itself is parsed from the
raw payload so the rest of the code works with plain dicts.
"""

import json

import stripe
from loguru import logger

from core.config import settings
from core.exceptions import WebhookSignatureError


stripe.api_key = settings.stripe_api_key or None


def construct_webhook_event(payload: bytes, sig_header: str, secret: str = None) -> dict:
    """
    Verify the Stripe-Signature header against the raw body and return the event.
    
    Raises WebhookSignatureError when the header is missing, malformed or
    does not match, or the body is not JSON.
    """
    secret = secret if secret is not None else settings.stripe_webhook_secret
    if not sig_header:
        raise WebhookSignatureError("Missing Stripe-Signature header")
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")
    
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    
    try:
        stripe.WebhookSignature.verify_header(
            payload, sig_header, secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
        )
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Webhook signature invalid: {e}")
        raise WebhookSignatureError(f"Webhook Error: {e}")
    
    try:
        event = json.loads(payload)
    except ValueError as e:
        raise WebhookSignatureError(f"Webhook Error: invalid payload ({e})")
    
    if not isinstance(event, dict) or not isinstance(event.get("type"), str):
        raise WebhookSignatureError("Webhook Error: payload is not an event")
    return event
