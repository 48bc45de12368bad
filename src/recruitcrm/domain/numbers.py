"""Normalization helpers for loosely typed numeric and date input.

Stored records arrive with optional fields, blank strings and locale
formatted numbers ("15,5"). Everything is converted here, once, when a
domain object is constructed. Arithmetic downstream only ever sees
Decimal, int or date values.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_optional_decimal(value) -> Optional[Decimal]:
    """Parse a number that may use a decimal comma.

    Returns None for missing, blank or non-numeric input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return Decimal(str(value))

    text = str(value).strip().replace(" ", "")
    if not text:
        return None
    text = text.replace(",", ".")
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def to_decimal(value, default: Decimal = ZERO) -> Decimal:
    """Parse a number, falling back to ``default`` when malformed."""
    parsed = to_optional_decimal(value)
    return default if parsed is None else parsed


def to_optional_count(value) -> Optional[int]:
    """Parse a whole-number counter, or None when missing/malformed."""
    parsed = to_optional_decimal(value)
    if parsed is None:
        return None
    return int(parsed)


def to_count(value) -> int:
    """Parse a whole-number counter; malformed input counts as 0."""
    parsed = to_optional_count(value)
    return 0 if parsed is None else parsed


def to_flag(value) -> bool:
    """Parse a stored boolean; strings such as "false" or "0" are False."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y", "on")
    return bool(value)


def to_optional_date(value) -> Optional[date]:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def quantize_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents for presentation."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Fixed two-decimal presentation, e.g. ``Decimal("90") -> "90.00"``."""
    return f"{quantize_money(amount):.2f}"
