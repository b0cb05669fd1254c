"""
Money & Formatting Utilities

Small helpers shared by the models, the controller and the UI:
currency formatting, timestamp formatting and id generation.
"""

import time
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union
from uuid import uuid4


MISSING_VALUE = "—"
HIDDEN_AMOUNT = "••••••"


def generate_id(prefix: str = "id") -> str:
    """
    Generate a unique identifier.

    Format: ``<prefix>-<epoch milliseconds>-<9 random characters>``.
    """
    return f"{prefix}-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def format_currency(amount: Union[Decimal, int, float], symbol: str) -> str:
    """
    Format an amount for display with the currency symbol as a suffix.

    Uses thousands separators and up to two decimal places,
    dropping trailing zeros (``1234.50`` -> ``1,234.5``).
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    formatted = f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{formatted} {symbol}"


def mask_amount(
    amount: Union[Decimal, int, float],
    symbol: str,
    hidden: bool,
) -> str:
    """Format an amount, or return a mask when the balance is hidden."""
    if hidden:
        return HIDDEN_AMOUNT
    return format_currency(amount, symbol)


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a timestamp as e.g. ``17 Oct 2026, 09:30 PM``."""
    if value is None:
        return MISSING_VALUE
    return value.strftime("%d %b %Y, %I:%M %p")
