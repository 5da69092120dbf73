"""
core/utils.py - Pure numeric helpers shared by the model, codec and geometry code.

These are kept free of Qt so they can be unit tested directly.
"""

import math
import re
from typing import Any, Optional


_NUMBER_RE = re.compile(r'^\s*[-+]?(\d+(\.\d*)?|\.\d+)')


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding (round(20.5) == 20); printer
    coordinates always round .5 up so 20.5 dots becomes 21.
    """
    return int(math.floor(float(value) + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp *value* into [low, high].

    If the range is inverted (high < low) the lower bound wins, so an element
    wider than its container is pinned to 0 rather than pushed negative.
    """
    return max(low, min(high, value))


def coerce_number(value: Any, fallback: Optional[float]) -> Optional[float]:
    """
    Convert a user-entered field value to a float.

    Accepts ints, floats and strings with a leading number ("12", " 3.5",
    "40px"). Blank strings, NaN/inf, booleans and anything else return
    *fallback* instead of raising.
    """
    if isinstance(value, bool):
        return fallback

    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        m = _NUMBER_RE.match(value)
        if not m:
            return fallback
        result = float(m.group(0))
    else:
        return fallback

    if math.isnan(result) or math.isinf(result):
        return fallback
    return result


def leading_int(text: str) -> Optional[int]:
    """
    Parse the integer at the start of *text* ("812", "812 ; width").

    Returns None when *text* does not start with digits.
    """
    m = re.match(r'\s*(\d+)', text or "")
    if not m:
        return None
    return int(m.group(1))
