"""Shared validators for Pydantic config models.

This module provides common validation utilities used across
configuration models:
- Duration string parsing (``6h``, ``1h30m``, ``90s``)
- String list normalization
"""

import re
from datetime import timedelta
from typing import Any

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
    "ms": "milliseconds",
}


def parse_duration(value: Any) -> timedelta:
    """Parse a duration value into a timedelta.

    Accepts timedeltas, plain numbers (seconds), numeric strings (seconds)
    and compound unit strings such as ``"6h"``, ``"1h30m"`` or ``"45s"``.

    Args:
        value: Raw duration value

    Returns:
        Parsed timedelta

    Raises:
        ValueError: If the value is empty, malformed or not positive
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    elif isinstance(value, (int, float)):
        duration = timedelta(seconds=value)
    elif isinstance(value, str):
        text = value.strip().lower()
        if not text:
            raise ValueError("Duration must not be empty")
        if re.fullmatch(r"\d+(?:\.\d+)?", text):
            duration = timedelta(seconds=float(text))
        else:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(num + unit for num, unit in parts) != text:
                raise ValueError(f"Invalid duration string: {value!r}")
            duration = timedelta()
            for number, unit in parts:
                duration += timedelta(**{_DURATION_UNITS[unit]: float(number)})
    else:
        raise ValueError(f"Invalid duration: {value!r}")

    if duration <= timedelta(0):
        raise ValueError(f"Duration must be positive (got {value!r})")
    return duration


def normalize_string_list(value: Any) -> list[str]:
    """Normalize string list to lowercase.

    Handles None, single strings (comma separated), and lists.

    Args:
        value: Input value (None, str, or list[str])

    Returns:
        List of lowercased, stripped, non-empty strings
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [s.strip().lower() for s in value if isinstance(s, str) and s.strip()]
    return []


__all__ = [
    "parse_duration",
    "normalize_string_list",
]
