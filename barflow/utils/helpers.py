"""
Common utility functions used across the library.
"""

import math
from typing import Any


def require_min_int(name: str, value: Any, minimum: int, fix: str) -> int:
    """
    Validate an integer constructor parameter, failing loudly.

    Args:
        name: Parameter name for the error message.
        value: Value to validate.
        minimum: Smallest accepted value (inclusive).
        fix: Example of a valid call, shown in the error.

    Returns:
        The validated value.

    Raises:
        ValueError: If value is not an int (bools rejected) or is < minimum.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(
            f"{name} must be an integer >= {minimum}, got {value!r}\n"
            f"\n"
            f"Fix: {fix}"
        )
    return value


def safe_float(value: Any, default: float | None = 0.0) -> float | None:
    """
    Convert value to float, treating None, "" and NaN as missing.

    Examples:
        >>> safe_float("123.45")
        123.45
        >>> safe_float(None)
        0.0
        >>> safe_float(float("nan"), default=-1.0)
        -1.0
    """
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (ValueError, TypeError):
        return default
    if math.isnan(result):
        return default
    return result
