"""
Manual payment methods - centralized definitions.

Each method describes where the owner sends money and what steps to follow.
The instructions are shown once, right after initiation.

Usage:
    from core.payment_methods import get_payment_instructions, format_amount
    
    format_amount(50000)                        # "₹500.00"
    get_payment_instructions("upi", 50000)
"""

from typing import Dict, Optional

from database.models import PaymentMethod


# ==================== METHOD DEFINITIONS ====================

PAYMENT_METHODS: Dict[str, dict] = {
    PaymentMethod.upi.value: {
        "title": "Pay via UPI (Google Pay)",
        "app": "Google Pay",
        "upi_id": "himwasnik11@oksbi",
        "send_step": 'Go to "Send" or tap the search icon',
        "sort_order": 1,
    },
    PaymentMethod.netbanking.value: {
        "title": "Pay via UPI (PhonePe)",
        "app": "PhonePe",
        "upi_id": "8010862538@axl",
        "send_step": 'Tap the "Send" or "Pay to UPI ID" option',
        "sort_order": 2,
    },
}

MANUAL_METHODS = tuple(PAYMENT_METHODS.keys())

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
}


def format_amount(amount_cents: int, currency: str = "INR") -> str:
    """Minor units -> display string with two decimals."""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{amount_cents / 100:.2f}"


def get_payment_instructions(method: str, amount_cents: int, currency: str = "INR") -> Optional[dict]:
    """Step-by-step instructions for a manual payment, or None for unknown methods."""
    definition = PAYMENT_METHODS.get(method)
    if not definition:
        return None
    
    amount = format_amount(amount_cents, currency)
    return {
        "title": definition["title"],
        "steps": [
            f"Amount to pay: {amount}",
            f"Open {definition['app']} app on your phone",
            definition["send_step"],
            f"Enter UPI ID: {definition['upi_id']}",
            f"Enter amount: {amount}",
            "Complete the transaction and wait for confirmation",
        ],
        "note": "Your subscription will activate immediately after payment confirmation.",
        "upi_id": definition["upi_id"],
    }


def get_all_methods() -> list:
    """All manual methods for API response."""
    result = []
    for key, method in PAYMENT_METHODS.items():
        result.append({
            "key": key,
            "title": method["title"],
            "app": method["app"],
            "upi_id": method["upi_id"],
        })
    result.sort(key=lambda x: PAYMENT_METHODS[x["key"]]["sort_order"])
    return result
