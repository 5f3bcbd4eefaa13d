"""
Value semantics shared by filters and conditional rendering.

Template data is JSON-shaped, and the truthiness and text conversion rules
follow the JSON/JavaScript conventions that template authors write against,
not Python's: an empty list is truthy, `1.0` prints as `1`, booleans print
as `true`/`false`.
"""

import math
from typing import Any


def is_falsy(value: Any) -> bool:
    """
    Check a value against the falsy set false, 0, -0, NaN, "", null.

    Absent values are represented as None. Containers are never falsy.
    """
    if value is None or value is False or value == "":
        return True
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return value == 0 or math.isnan(value)


def stringify(value: Any) -> str:
    """
    Convert a value to display text.

    Examples:
        None -> ""
        True -> "true"
        3.0 -> "3"
        2.5 -> "2.5"
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def to_number(value: Any) -> float | int:
    """
    Coerce a value to a number.

    Booleans map to 1/0, None and blank text to 0, numeric text to its value;
    anything else, including text with `_` digit separators, is NaN.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if "_" in text:
            return math.nan
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan
