"""
Decimal normalizer.

Every monetary and quantity field on a service order passes through
to_number() before arithmetic. Persisted records arrive as plain numbers,
numeric strings (sometimes in Brazilian format, "1.234,56"), nulls, or
wrapped high-precision decimals ({"$numberDecimal": "12.50"} from the
document store, or Decimal128-like objects). This module is the single
place that knows about those shapes; the rest of the engine only sees floats.

to_number() never raises and never returns NaN or infinity.
"""

import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

_WRAPPER_KEYS = ("$numberDecimal", "$numberDouble", "$numberInt", "$numberLong", "value")

_CURRENCY_RE = re.compile(r"(R\$|\$|\s)")


def _finite(number: float) -> float:
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _parse_string(text: str) -> float | None:
    """Parse a numeric string with optional locale punctuation."""
    cleaned = _CURRENCY_RE.sub("", text)
    if not cleaned:
        return None

    has_dot = "." in cleaned
    has_comma = "," in cleaned

    if has_dot and has_comma:
        # Right-most separator is the decimal one
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        if cleaned.count(",") > 1:
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    try:
        return float(Decimal(cleaned))
    except (InvalidOperation, ValueError):
        return None


def to_number(value: Any) -> float:
    """
    Normalize any numeric representation to a finite float.

    Args:
        value: int, float, Decimal, numeric string, None, a wrapper dict
            such as {"$numberDecimal": "1.5"}, or an object exposing
            to_decimal() / __float__

    Returns:
        The float value, or 0.0 when the input is missing or unparseable.
    """
    if value is None:
        return 0.0

    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, (int, float)):
        try:
            return _finite(float(value))
        except OverflowError:
            logger.debug("Integer too large for a float, using 0")
            return 0.0

    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0.0
        return _finite(float(value))

    if isinstance(value, str):
        if not value.strip():
            return 0.0
        parsed = _parse_string(value.strip())
        if parsed is None:
            logger.debug(f"Unparseable numeric string {value!r}, using 0")
            return 0.0
        return _finite(parsed)

    if isinstance(value, dict):
        for key in _WRAPPER_KEYS:
            if key in value:
                return to_number(value[key])
        logger.debug(f"Unrecognized numeric wrapper {value!r}, using 0")
        return 0.0

    to_decimal = getattr(value, "to_decimal", None)
    if callable(to_decimal):
        try:
            return to_number(to_decimal())
        except Exception:
            logger.debug(f"to_decimal() failed for {type(value).__name__}, using 0")
            return 0.0

    try:
        return _finite(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Cannot normalize {type(value).__name__} value, using 0")
        return 0.0
