"""Per-value formatting dispatch.

Selects the invariant formatter for a value based on its runtime type.
Strings, booleans and plain objects ignore the format string; numbers,
dates, times and intervals interpret it; objects with their own
``__format__`` receive it unchanged.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from logvalues.errors import FormatError
from logvalues.formatting.dates import format_date, format_timedelta
from logvalues.formatting.numeric import format_number


def _has_own_format(value: Any) -> bool:
    return type(value).__format__ is not object.__format__


def format_value(value: Any, spec: str | None = None) -> str:
    """Format a single value.

    Args:
        value: Any value
        spec: Format string, None or empty for the default representation

    Returns:
        Formatted text

    Raises:
        FormatError: If ``spec`` is not valid for the value's type
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float, Decimal)):
        return format_number(value, spec)
    if isinstance(value, (datetime, date, time)):
        return format_date(value, spec)
    if isinstance(value, timedelta):
        return format_timedelta(value, spec)

    if spec and _has_own_format(value):
        try:
            return format(value, spec)
        except (TypeError, ValueError) as e:
            raise FormatError(
                f"Format string {spec!r} is not valid for {type(value).__name__}: {e}"
            ) from e

    return str(value)


def to_text(value: Any) -> str:
    """Return the default invariant text of ``value``."""
    return format_value(value, None)
