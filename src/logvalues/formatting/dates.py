"""Locale-invariant date, time and interval formatting.

Standard formats are single letters mapped to fixed invariant patterns;
anything longer is a custom pattern (``yyyy-MM-dd HH:mm:ss.fff``). Values
are never converted to or from the host time zone: naive values are
formatted as given, aware values keep their own offset except for the
``r``, ``u`` and ``U`` formats which convert to UTC.
"""

from datetime import UTC, date, datetime, time, timedelta

from logvalues.errors import FormatError

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Invariant patterns of the standard date/time format letters
STANDARD_PATTERNS: dict[str, str] = {
    "d": "MM/dd/yyyy",
    "D": "dddd, dd MMMM yyyy",
    "f": "dddd, dd MMMM yyyy HH:mm",
    "F": "dddd, dd MMMM yyyy HH:mm:ss",
    "g": "MM/dd/yyyy HH:mm",
    "G": "MM/dd/yyyy HH:mm:ss",
    "M": "MMMM dd",
    "m": "MMMM dd",
    "O": "yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK",
    "o": "yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK",
    "R": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "r": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "s": "yyyy'-'MM'-'dd'T'HH':'mm':'ss",
    "t": "HH:mm",
    "T": "HH:mm:ss",
    "u": "yyyy'-'MM'-'dd HH':'mm':'ss'Z'",
    "U": "dddd, dd MMMM yyyy HH:mm:ss",
    "Y": "yyyy MMMM",
    "y": "yyyy MMMM",
}

# Standard formats that render in UTC
_UTC_FORMATS = frozenset("rRuU")

# Letters with a meaning in custom patterns
_PATTERN_LETTERS = frozenset("yMdHhmsfFtKz")


def _as_datetime(value: datetime | date | time) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.combine(date(1, 1, 1), value)


def _fraction_digits(value: datetime, count: int, trim: bool) -> str:
    # Seven digits of 100ns resolution; microseconds supply the first six
    digits = f"{value.microsecond:06d}0"[:count]
    return digits.rstrip("0") if trim else digits


def _offset_text(value: datetime, width: int) -> str:
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    hours, minutes = divmod(minutes, 60)
    if width == 1:
        return f"{sign}{hours}"
    if width == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _kind_text(value: datetime) -> str:
    if value.tzinfo is None:
        return ""
    if value.utcoffset() == timedelta(0):
        return "Z"
    return _offset_text(value, 3)


def _render_field(value: datetime, letter: str, count: int) -> str:
    if letter == "y":
        if count <= 2:
            year = value.year % 100
            return f"{year:0{count}d}"
        return f"{value.year:0{count}d}"
    if letter == "M":
        if count <= 2:
            return f"{value.month:0{count}d}"
        name = MONTH_NAMES[value.month - 1]
        return name[:3] if count == 3 else name
    if letter == "d":
        if count <= 2:
            return f"{value.day:0{count}d}"
        name = DAY_NAMES[value.weekday()]
        return name[:3] if count == 3 else name
    if letter == "H":
        return f"{value.hour:0{min(count, 2)}d}"
    if letter == "h":
        hour = value.hour % 12 or 12
        return f"{hour:0{min(count, 2)}d}"
    if letter == "m":
        return f"{value.minute:0{min(count, 2)}d}"
    if letter == "s":
        return f"{value.second:0{min(count, 2)}d}"
    if letter in "fF":
        if count > 7:
            raise FormatError(f"Too many {letter!r} specifiers in date format")
        return _fraction_digits(value, count, trim=letter == "F")
    if letter == "t":
        designator = "AM" if value.hour < 12 else "PM"
        return designator[:1] if count == 1 else designator
    if letter == "K":
        return _kind_text(value)
    # z, zz, zzz
    return _offset_text(value, min(count, 3))


def format_date_pattern(value: datetime, pattern: str) -> str:
    """Render ``value`` with a custom date/time pattern.

    Args:
        value: Datetime to render
        pattern: Custom pattern such as ``"yyyy-MM-dd HH:mm:ss"``

    Returns:
        Formatted text

    Raises:
        FormatError: If a quoted literal is unterminated or a field repeats
            too often
    """
    out: list[str] = []
    i = 0
    length = len(pattern)

    while i < length:
        char = pattern[i]

        if char in _PATTERN_LETTERS:
            run_end = i
            while run_end < length and pattern[run_end] == char:
                run_end += 1
            text = _render_field(value, char, run_end - i)
            if char == "F" and not text and out and out[-1] == ".":
                # A fully trimmed fraction takes its separator with it
                out.pop()
            out.append(text)
            i = run_end
            continue

        if char in "'\"":
            close = pattern.find(char, i + 1)
            if close == -1:
                raise FormatError(f"Unterminated quoted literal in date format {pattern!r}")
            out.append(pattern[i + 1 : close])
            i = close + 1
            continue

        if char == "\\":
            if i + 1 >= length:
                raise FormatError(f"Trailing escape character in date format {pattern!r}")
            out.append(pattern[i + 1])
            i += 2
            continue

        if char == "%":
            # Marks a single-letter custom pattern, prints nothing
            i += 1
            continue

        out.append(char)
        i += 1

    return "".join(out)


def format_date(value: datetime | date | time, spec: str | None = None) -> str:
    """Format a date, time or datetime.

    Args:
        value: Value to format
        spec: Standard letter, custom pattern, or None for the default
            (``G`` for datetime, ``d`` for date, ``T`` for time)

    Returns:
        Formatted text

    Raises:
        FormatError: If ``spec`` is a single letter that is not a standard format

    Examples:
        >>> format_date(datetime(2024, 3, 5, 14, 7, 9))
        '03/05/2024 14:07:09'
        >>> format_date(date(2024, 3, 5), "yyyy-MM-dd")
        '2024-03-05'
    """
    if not spec:
        if isinstance(value, datetime):
            spec = "G"
        elif isinstance(value, date):
            spec = "d"
        else:
            spec = "T"

    moment = _as_datetime(value)

    if len(spec) == 1:
        if spec not in STANDARD_PATTERNS:
            raise FormatError(f"Format specifier {spec!r} is not a valid date/time format")
        if spec in _UTC_FORMATS and moment.tzinfo is not None:
            moment = moment.astimezone(UTC)
        return format_date_pattern(moment, STANDARD_PATTERNS[spec])

    return format_date_pattern(moment, spec)


def format_timedelta(value: timedelta, spec: str | None = None) -> str:
    """Format an interval.

    Supported formats: ``c`` (also ``t``/``T`` and the default),
    ``[-][d.]hh:mm:ss[.fffffff]``; ``g``, ``[-][d:]h:mm:ss[.FFFFFFF]``;
    ``G``, ``[-]d:hh:mm:ss.fffffff``.

    Raises:
        FormatError: For any other format string

    Examples:
        >>> format_timedelta(timedelta(days=1, hours=2, seconds=3))
        '1.02:00:03'
        >>> format_timedelta(timedelta(minutes=5), "g")
        '0:05:00'
    """
    spec = spec or "c"
    if spec not in ("c", "t", "T", "g", "G"):
        raise FormatError(f"Format specifier {spec!r} is not a valid interval format")

    sign = "-" if value < timedelta(0) else ""
    magnitude = abs(value)
    days = magnitude.days
    hours, remainder = divmod(magnitude.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    fraction = f"{magnitude.microseconds:06d}0"

    if spec == "G":
        return f"{sign}{days}:{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction}"

    if spec == "g":
        head = f"{days}:" if days else ""
        trimmed = fraction.rstrip("0")
        tail = f".{trimmed}" if trimmed else ""
        return f"{sign}{head}{hours}:{minutes:02d}:{seconds:02d}{tail}"

    head = f"{days}." if days else ""
    tail = f".{fraction}" if magnitude.microseconds else ""
    return f"{sign}{head}{hours:02d}:{minutes:02d}:{seconds:02d}{tail}"
