"""
Safe Math Utility - None/zero tolerant arithmetic for report fields.

API payloads routinely omit fields or send numbers as strings, so every
derived metric goes through these helpers instead of raw operators.
"""
from typing import Union, Optional

Number = Union[int, float, str, None]


def to_float(value: Number, default: Optional[float] = None) -> Optional[float]:
    """
    Coerce an API value to float.

    Examples:
        >>> to_float("12.5")
        12.5
        >>> to_float(None) is None
        True
        >>> to_float("n/a", default=0.0)
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Number, default: Optional[int] = None) -> Optional[int]:
    """Coerce an API value to int (accepts "123" and 123.0)."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        as_float = to_float(value)
        return int(as_float) if as_float is not None else default


def safe_div(
    numerator: Number,
    denominator: Number,
    default: Optional[float] = None
) -> Optional[float]:
    """
    Division that returns ``default`` instead of raising.

    Examples:
        >>> safe_div(10, 4)
        2.5
        >>> safe_div(10, 0) is None
        True
        >>> safe_div(None, 10, default=0.0)
        0.0
    """
    num = to_float(numerator)
    den = to_float(denominator)
    if num is None or den is None or den == 0:
        return default
    return num / den


def safe_pct(part: Number, whole: Number, default: Optional[float] = None) -> Optional[float]:
    """Share of ``part`` in ``whole`` as a 0-100 percentage."""
    ratio = safe_div(part, whole)
    if ratio is None:
        return default
    return ratio * 100


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))
