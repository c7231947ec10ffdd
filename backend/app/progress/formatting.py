from __future__ import annotations

from typing import Any, Dict

from backend.app.progress.records import coerce_amount

DEFAULT_CURRENCY = "GBP"

CURRENCY_SYMBOLS: Dict[str, str] = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "INR": "₹",
    "AUD": "A$",
    "CAD": "CA$",
    "NZD": "NZ$",
}

# currencies displayed without minor units
ZERO_DECIMAL = {"JPY"}


def format_currency(amount: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Display helper: 1234.5, "GBP" -> "£1,234.50"; -5, "USD" -> "-$5.00".
    Unknown codes render as "CHF 1,234.50".
    """
    code = (currency or DEFAULT_CURRENCY).strip().upper()
    value = coerce_amount(amount)
    digits = 0 if code in ZERO_DECIMAL else 2
    body = f"{abs(value):,.{digits}f}"
    sign = "-" if value < 0 and float(body.replace(",", "")) != 0 else ""
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{code} {body}"
