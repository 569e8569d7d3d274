"""Lenient number parsing for form inputs and price display formatting."""

import math
import re

_DECIMAL_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")

CURRENCY = "HC"


def parse_decimal(text: str | None, default: float = 0.0) -> float:
    """Parse the leading number in text, like a browser number field.

    "12.5abc" -> 12.5; "", "abc", "nan" -> default. A zero result also
    falls back to default.
    """
    if text is None:
        return default
    match = _DECIMAL_PREFIX.match(str(text))
    if match is None:
        return default
    value = float(match.group(0))
    if math.isnan(value) or math.isinf(value) or value == 0:
        return default
    return value


def parse_int(text: str | None, default: int = 1) -> int:
    """Parse the leading integer in text; falls back to default when absent or zero."""
    if text is None:
        return default
    match = _INT_PREFIX.match(str(text))
    if match is None:
        return default
    return int(match.group(0)) or default


def format_price(price: float) -> str:
    """Whole prices render without decimals, others with up to three."""
    if price % 1 == 0:
        return f"{price:.0f} {CURRENCY}"
    text = f"{price:.3f}".rstrip("0").rstrip(".")
    return f"{text} {CURRENCY}"


def total_value(amount: int, price_per_unit: float) -> int:
    return math.ceil(amount * price_per_unit)


def display_item_name(item_name: str) -> str:
    return item_name[:1].upper() + item_name[1:]
