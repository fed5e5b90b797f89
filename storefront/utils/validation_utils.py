"""
storefront/utils/validation_utils.py

Purpose: Input validation

- Amount / price parsing into Decimal
- Major <-> minor currency unit conversion
- Password length checks
- Input trimming
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

MINOR_UNITS_PER_MAJOR = 100

# Largest accepted amount in major units; keeps minor-unit conversion exact
MAX_AMOUNT = Decimal("1000000000000")


def parse_positive_amount(value: Any) -> Optional[Decimal]:
    """
    Parses a client-supplied amount or price.

    Accepts numbers and numeric strings. Booleans, NaN, infinities,
    zero, negatives and amounts above MAX_AMOUNT are rejected.

    Returns:
        The amount as Decimal, or None if it is not a positive number
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        return None

    return amount


def to_minor_units(amount: Decimal) -> int:
    """
    Converts major units to the gateway's minor unit, rounding half up
    to the nearest integer (12.345 -> 1235).
    """
    return int((amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    """
    Converts a gateway minor-unit amount back to major units.
    """
    return Decimal(int(amount)) / MINOR_UNITS_PER_MAJOR


def is_valid_password(password: str, min_length: int = 8) -> bool:
    return bool(password) and len(password) >= min_length


def clean_text(text: Optional[str]) -> str:
    """
    Trims surrounding whitespace; None becomes an empty string.
    """
    if not text:
        return ""
    return str(text).strip()
