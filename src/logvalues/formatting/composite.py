"""Composite format strings with positional items.

Implements ``{index[,alignment][:formatString]}`` formatting, the form a
compiled template is rendered through. Doubled braces are literal braces.
"""

from collections.abc import Sequence
from typing import Any

from logvalues.errors import FormatError
from logvalues.formatting.values import format_value

# Upper bound for item indexes and alignment widths
MAX_ITEM_NUMBER = 1_000_000


def _invalid(position: int) -> FormatError:
    return FormatError(f"Input string was not in a correct format (position {position})", position)


def _skip_spaces(fmt: str, pos: int) -> int:
    while pos < len(fmt) and fmt[pos] == " ":
        pos += 1
    return pos


def _read_number(fmt: str, pos: int) -> tuple[int, int]:
    """Read a run of ASCII digits starting at ``pos``."""
    start = pos
    while pos < len(fmt) and "0" <= fmt[pos] <= "9":
        pos += 1
    if pos == start:
        raise _invalid(pos)
    value = int(fmt[start:pos])
    if value >= MAX_ITEM_NUMBER:
        raise _invalid(start)
    return value, pos


def _read_format_spec(fmt: str, pos: int) -> tuple[str, int]:
    """Read a format string up to its closing brace.

    Returns:
        Format string with escapes resolved and the index of the closing brace
    """
    chars: list[str] = []
    length = len(fmt)
    while pos < length:
        char = fmt[pos]
        if char == "{":
            if pos + 1 < length and fmt[pos + 1] == "{":
                chars.append("{")
                pos += 2
                continue
            raise _invalid(pos)
        if char == "}":
            if pos + 1 < length and fmt[pos + 1] == "}":
                chars.append("}")
                pos += 2
                continue
            return "".join(chars), pos
        chars.append(char)
        pos += 1
    raise _invalid(pos)


def _align(text: str, width: int) -> str:
    if width > 0:
        return text.rjust(width)
    if width < 0:
        return text.ljust(-width)
    return text


def format_composite(fmt: str, values: Sequence[Any] | None) -> str:
    """Format ``fmt`` with positional ``values``.

    Args:
        fmt: Composite format string, e.g. ``"{0} took {1,8:F3} ms"``
        values: Arguments referenced by index

    Returns:
        Formatted string

    Raises:
        FormatError: If the format is malformed, references a missing
            argument, or has a format string that does not apply to its value

    Examples:
        >>> format_composite("{0,-4}|{1:D3}", ["ab", 7])
        'ab  |007'
        >>> format_composite("{{{0}}}", [1])
        '{1}'
    """
    args: Sequence[Any] = () if values is None else values
    out: list[str] = []
    length = len(fmt)
    pos = 0

    while pos < length:
        char = fmt[pos]

        if char == "}":
            if pos + 1 < length and fmt[pos + 1] == "}":
                out.append("}")
                pos += 2
                continue
            raise _invalid(pos)

        if char != "{":
            next_brace = min(
                (i for i in (fmt.find("{", pos), fmt.find("}", pos)) if i != -1),
                default=length,
            )
            out.append(fmt[pos:next_brace])
            pos = next_brace
            continue

        if pos + 1 < length and fmt[pos + 1] == "{":
            out.append("{")
            pos += 2
            continue

        item_start = pos
        index, pos = _read_number(fmt, pos + 1)
        if index >= len(args):
            raise FormatError(
                f"Index {index} is out of range for {len(args)} argument(s) "
                f"(position {item_start})",
                item_start,
            )
        pos = _skip_spaces(fmt, pos)

        width = 0
        if pos < length and fmt[pos] == ",":
            pos = _skip_spaces(fmt, pos + 1)
            negative = pos < length and fmt[pos] == "-"
            if negative:
                pos += 1
            width, pos = _read_number(fmt, pos)
            if negative:
                width = -width
            pos = _skip_spaces(fmt, pos)

        spec: str | None = None
        if pos < length and fmt[pos] == ":":
            spec, pos = _read_format_spec(fmt, pos + 1)

        if pos >= length or fmt[pos] != "}":
            raise _invalid(pos)
        pos += 1

        out.append(_align(format_value(args[index], spec), width))

    return "".join(out)
