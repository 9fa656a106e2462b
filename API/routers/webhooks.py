"""
Payment gateway webhooks.
Endpoint: /api/webhooks/...

The body is read raw: the signature covers the exact bytes sent.
"""

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from database import get_db
from services.gateway import construct_webhook_event
from services.webhooks import GatewayWebhookService

router = APIRouter()


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
):
    """Verify, apply, acknowledge. Unknown event types are acknowledged too."""
    payload = await request.body()
    event = construct_webhook_event(payload, stripe_signature)
    
    result = GatewayWebhookService(db).handle(event)
    return {
        "received": True,
        "event_type": result.event_type,
        "handled": result.handled,
    }
