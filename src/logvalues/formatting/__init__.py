"""Locale-invariant composite formatting.

- composite: ``{index[,alignment][:format]}`` format strings
- values: per-value dispatch and default text conversion
- numeric: standard and custom number formats
- dates: date, time and interval formats
"""

from logvalues.formatting.composite import format_composite
from logvalues.formatting.values import format_value, to_text

__all__ = [
    "format_composite",
    "format_value",
    "to_text",
]
