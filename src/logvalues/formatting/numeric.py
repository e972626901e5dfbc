"""Locale-invariant number formatting.

Supports the standard single-letter format strings (``C``, ``D``, ``E``,
``F``, ``G``, ``N``, ``P``, ``R``, ``X``, ``B``, each with an optional
precision) and custom picture strings built from ``0``, ``#``, ``.``, ``,``,
``%``, ``‰``, exponent markers, quoted literals and ``;`` sections.

Output never depends on the host locale: the decimal separator is ``.``,
the group separator ``,`` with groups of three, the currency symbol ``¤``.
Rounding is half away from zero on the exact decimal value of the number.
"""

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal

from logvalues.errors import FormatError

NAN_SYMBOL = "NaN"
POSITIVE_INFINITY_SYMBOL = "Infinity"
NEGATIVE_INFINITY_SYMBOL = "-Infinity"
CURRENCY_SYMBOL = "¤"
PERMILLE_SYMBOL = "‰"

# Decimal exponents outside [-4, 15) switch general notation to scientific
SCIENTIFIC_MIN_EXPONENT = -4
SCIENTIFIC_MAX_EXPONENT = 15

_STANDARD_FORMAT_RE = re.compile(r"^([A-Za-z])(\d{0,9})$")

Number = int | float | Decimal


# =============================================================================
# Decimal helpers
# =============================================================================


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


def _quantize(value: Decimal, places: int) -> Decimal:
    """Round ``value`` to ``places`` decimals, half away from zero."""
    precision = max(28, value.adjusted() + places + 3)
    context = Context(prec=precision, rounding=ROUND_HALF_UP)
    return value.quantize(Decimal(1).scaleb(-places), context=context)


def _round_significant(value: Decimal, digits: int) -> Decimal:
    """Round ``value`` to ``digits`` significant digits."""
    if value.is_zero():
        return value
    return _quantize(value, digits - 1 - value.adjusted())


def _fixed_parts(value: Decimal, places: int) -> tuple[str, str]:
    """Return integer and fraction digits of ``abs(value)`` rounded to ``places``."""
    text = format(_quantize(abs(value), places), "f")
    integer, _, fraction = text.partition(".")
    return integer, fraction


def _group(digits: str) -> str:
    """Insert ``,`` between groups of three integer digits."""
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i : i + 3] for i in range(head, len(digits), 3))
    return ",".join(groups)


def _significant(value: Decimal) -> tuple[str, int]:
    """Return the significant digits of ``abs(value)`` and its exponent.

    The exponent is that of the first digit, so ``1234`` gives ``("1234", 3)``.
    Trailing zeros are dropped.
    """
    if value.is_zero():
        return "0", 0
    normalized = abs(value).normalize()
    _, digit_tuple, exponent = normalized.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    return digits, len(digits) - 1 + int(exponent)


def _scientific(digits: str, exponent: int, exp_char: str, min_exp_digits: int) -> str:
    mantissa = digits[0]
    if len(digits) > 1:
        mantissa += "." + digits[1:]
    sign = "-" if exponent < 0 else "+"
    return f"{mantissa}{exp_char}{sign}{abs(exponent):0{min_exp_digits}d}"


def _general(value: Decimal, threshold: int, exp_char: str) -> str:
    """General notation of ``abs(value)``: fixed unless the exponent is out of range."""
    digits, exponent = _significant(value)
    if exponent >= threshold or exponent < SCIENTIFIC_MIN_EXPONENT:
        return _scientific(digits, exponent, exp_char, 2)
    if exponent < 0:
        return "0." + "0" * (-exponent - 1) + digits
    if len(digits) <= exponent + 1:
        return digits + "0" * (exponent + 1 - len(digits))
    return digits[: exponent + 1] + "." + digits[exponent + 1 :]


def _shortest_float(value: float) -> Decimal:
    """Shortest decimal that round-trips to ``value``."""
    return Decimal(repr(value))


def _with_sign(negative: bool, text: str, magnitude: Decimal) -> str:
    return "-" + text if negative and not magnitude.is_zero() else text


# =============================================================================
# Default text
# =============================================================================


def default_number_text(value: Number) -> str:
    """Return the invariant default text of a number.

    Examples:
        >>> default_number_text(1.0)
        '1'
        >>> default_number_text(1e16)
        '1E+16'
        >>> default_number_text(0.00001)
        '1E-05'
    """
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        d = _shortest_float(value)
        return _with_sign(value < 0, _general(d, SCIENTIFIC_MAX_EXPONENT, "E"), d)
    return format(value, "f")


# =============================================================================
# Standard formats
# =============================================================================


def _require_integer(value: Number, letter: str) -> int:
    if not isinstance(value, int):
        raise FormatError(
            f"Format specifier {letter!r} is only valid for integers, "
            f"got {type(value).__name__}"
        )
    return value


def _twos_complement(value: int) -> int:
    if value >= 0:
        return value
    for bits in (32, 64, 128):
        if value >= -(1 << (bits - 1)):
            return value & ((1 << bits) - 1)
    raise FormatError(f"Value {value} is too large for a two's complement representation")


def _format_general(value: Number, precision: int | None, exp_char: str) -> str:
    if not precision:
        if isinstance(value, float):
            d = _shortest_float(value)
            return _with_sign(value < 0, _general(d, SCIENTIFIC_MAX_EXPONENT, exp_char), d)
        if isinstance(value, int):
            return str(value)
        d = _to_decimal(value)
        return _with_sign(d < 0, _general(d, max(d.adjusted() + 1, 29), exp_char), d)

    d = _round_significant(_to_decimal(value), precision)
    return _with_sign(d < 0, _general(d, precision, exp_char), d)


def _format_exponential(value: Number, precision: int | None, exp_char: str) -> str:
    places = 6 if precision is None else precision
    d = _round_significant(_to_decimal(value), places + 1)
    digits, exponent = _significant(d)
    digits = digits.ljust(places + 1, "0")
    mantissa = digits[0] + ("." + digits[1:] if places else "")
    sign = "-" if exponent < 0 else "+"
    return _with_sign(d < 0, f"{mantissa}{exp_char}{sign}{abs(exponent):03d}", d)


def _format_fixed(value: Number, precision: int | None, grouped: bool) -> tuple[bool, str]:
    places = 2 if precision is None else precision
    d = _to_decimal(value)
    integer, fraction = _fixed_parts(d, places)
    if grouped:
        integer = _group(integer)
    text = integer + ("." + fraction if fraction else "")
    negative = d < 0 and not _quantize(d, places).is_zero()
    return negative, text


def _format_standard(value: Number, letter: str, precision: int | None) -> str:
    kind = letter.upper()

    if kind == "D":
        number = _require_integer(value, letter)
        text = str(abs(number)).zfill(precision or 0)
        return "-" + text if number < 0 else text

    if kind in ("X", "B"):
        number = _twos_complement(_require_integer(value, letter))
        # Hex digit case follows the specifier letter
        text = format(number, "b" if kind == "B" else letter)
        return text.zfill(precision or 0)

    if kind == "F":
        negative, text = _format_fixed(value, precision, grouped=False)
        return "-" + text if negative else text

    if kind == "N":
        negative, text = _format_fixed(value, precision, grouped=True)
        return "-" + text if negative else text

    if kind == "C":
        negative, text = _format_fixed(value, precision, grouped=True)
        return f"({CURRENCY_SYMBOL}{text})" if negative else f"{CURRENCY_SYMBOL}{text}"

    if kind == "P":
        negative, text = _format_fixed(_to_decimal(value) * 100, precision, grouped=True)
        return f"-{text} %" if negative else f"{text} %"

    if kind == "E":
        return _format_exponential(value, precision, letter)

    if kind == "G":
        return _format_general(value, precision, "E" if letter == "G" else "e")

    if kind == "R":
        if isinstance(value, Decimal):
            raise FormatError("Format specifier 'R' is not valid for Decimal")
        return _format_general(value, None, "E" if letter == "R" else "e")

    raise FormatError(f"Format specifier {letter!r} is not valid for numbers")


# =============================================================================
# Custom formats
# =============================================================================


def _split_sections(fmt: str) -> list[str]:
    """Split a custom format on unquoted, unescaped ``;``."""
    sections: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(fmt):
        char = fmt[i]
        if quote:
            if char == quote:
                quote = None
            current.append(char)
        elif char in "'\"":
            quote = char
            current.append(char)
        elif char == "\\":
            current.append(fmt[i : i + 2])
            i += 2
            continue
        elif char == ";":
            sections.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    sections.append("".join(current))
    return sections


def _tokenize(section: str) -> list[tuple[str, str]]:
    """Split a custom format section into (kind, text) tokens."""
    tokens: list[tuple[str, str]] = []
    seen_point = False
    i = 0
    length = len(section)
    while i < length:
        char = section[i]
        if char in "0#":
            tokens.append(("digit", char))
        elif char == ".":
            # Only the first point is significant
            if not seen_point:
                tokens.append(("point", char))
                seen_point = True
        elif char == ",":
            tokens.append(("comma", char))
        elif char == "%":
            tokens.append(("percent", char))
        elif char == PERMILLE_SYMBOL:
            tokens.append(("permille", char))
        elif char in "Ee":
            j = i + 1
            if j < length and section[j] in "+-":
                j += 1
            zeros = j
            while zeros < length and section[zeros] == "0":
                zeros += 1
            if zeros > j:
                tokens.append(("exp", section[i:zeros]))
                i = zeros
                continue
            tokens.append(("literal", char))
        elif char == "\\":
            tokens.append(("literal", section[i + 1 : i + 2]))
            i += 2
            continue
        elif char in "'\"":
            close = section.find(char, i + 1)
            if close == -1:
                close = length
            tokens.append(("literal", section[i + 1 : close]))
            i = close + 1
            continue
        else:
            tokens.append(("literal", char))
        i += 1
    return tokens


class _Picture:
    """Analyzed custom format section."""

    def __init__(self, section: str) -> None:
        self.tokens = _tokenize(section)
        kinds = [kind for kind, _ in self.tokens]

        self.point = kinds.index("point") if "point" in kinds else None
        self.exp = kinds.index("exp") if "exp" in kinds else None
        int_end = min(i for i in (self.point, self.exp, len(kinds)) if i is not None)
        frac_end = self.exp if self.exp is not None else len(kinds)

        self.int_slots = [i for i in range(int_end) if kinds[i] == "digit"]
        self.frac_slots = [
            i for i in range(int_end, frac_end) if kinds[i] == "digit" and i != self.point
        ]
        self.has_digits = bool(self.int_slots or self.frac_slots)

        # Commas after the last integer placeholder scale, commas between group
        self.scale = 0
        self.grouped = False
        if self.int_slots:
            first, last = self.int_slots[0], self.int_slots[-1]
            commas = [i for i in range(int_end) if kinds[i] == "comma"]
            self.grouped = any(first < i < last for i in commas)
            trailing = int_end - 1
            while trailing > last and kinds[trailing] == "comma":
                self.scale += 1
                trailing -= 1

        self.percent = kinds.count("percent")
        self.permille = kinds.count("permille")

        zeros = [i for i in self.int_slots if self.tokens[i][1] == "0"]
        self.min_int = len([i for i in self.int_slots if zeros and i >= zeros[0]])
        frac_zeros = [n for n, i in enumerate(self.frac_slots) if self.tokens[i][1] == "0"]
        self.min_frac = frac_zeros[-1] + 1 if frac_zeros else 0

    def scaled(self, magnitude: Decimal) -> Decimal:
        shift = 2 * self.percent + 3 * self.permille - 3 * self.scale
        return magnitude.scaleb(shift) if shift else magnitude

    def render(self, magnitude: Decimal) -> tuple[str, bool]:
        """Render ``magnitude`` (non-negative) into this picture.

        Returns:
            Output text and whether the rounded number is zero
        """
        places = len(self.frac_slots)
        exponent = 0
        value = self.scaled(magnitude)

        if self.exp is not None and not value.is_zero():
            int_count = max(len(self.int_slots), 1)
            exponent = value.adjusted() - (int_count - 1)
            mantissa = _quantize(value.scaleb(-exponent), places)
            if mantissa.adjusted() >= int_count:
                exponent += 1
                mantissa = _quantize(value.scaleb(-exponent), places)
            value = mantissa
        else:
            value = _quantize(value, places)

        integer, _, fraction = format(value, "f").partition(".")
        is_zero = value.is_zero()

        integer = integer.lstrip("0").zfill(self.min_int) if self.min_int else integer.lstrip("0")
        fraction = fraction.ljust(places, "0")
        while len(fraction) > self.min_frac and fraction.endswith("0"):
            fraction = fraction[:-1]

        return self._emit(integer, fraction, exponent), is_zero

    def _emit(self, integer: str, fraction: str, exponent: int) -> str:
        out: list[str] = []
        total = len(integer)
        slot_count = len(self.int_slots)
        emitted = 0

        def emit_digits(chunk: str) -> None:
            nonlocal emitted
            for digit in chunk:
                out.append(digit)
                emitted += 1
                remaining = total - emitted
                if self.grouped and remaining > 0 and remaining % 3 == 0:
                    out.append(",")

        for index, (kind, text) in enumerate(self.tokens):
            if kind == "digit" and index in self.int_slots:
                slot = self.int_slots.index(index)
                if slot == 0:
                    emit_digits(integer[: max(0, total - slot_count + 1)])
                else:
                    position = total - slot_count + slot
                    if position >= 0:
                        emit_digits(integer[position])
            elif kind == "digit":
                slot = self.frac_slots.index(index)
                if slot < len(fraction):
                    out.append(fraction[slot])
            elif kind == "point":
                if not self.int_slots and self.has_digits:
                    emit_digits(integer)
                if fraction:
                    out.append(".")
            elif kind == "exp" and index == self.exp:
                marker, sign_char = text[0], text[1] if text[1] in "+-" else ""
                min_digits = len(text) - 1 - len(sign_char)
                sign = "-" if exponent < 0 else "+" if sign_char == "+" else ""
                out.append(f"{marker}{sign}{abs(exponent):0{min_digits}d}")
            elif kind == "percent":
                out.append("%")
            elif kind == "permille":
                out.append(PERMILLE_SYMBOL)
            elif kind == "literal":
                out.append(text)
            # Commas never print; grouping is applied while emitting digits

        return "".join(out)


def _format_custom(value: Number, fmt: str) -> str:
    sections = _split_sections(fmt)
    d = _to_decimal(value)
    negative = d < 0
    magnitude = abs(d)

    if negative and len(sections) > 1 and sections[1]:
        text, is_zero = _Picture(sections[1]).render(magnitude)
    elif d.is_zero() and len(sections) > 2 and sections[2]:
        return _Picture(sections[2]).render(magnitude)[0]
    else:
        text, is_zero = _Picture(sections[0]).render(magnitude)
        if negative and not is_zero and (len(sections) == 1 or not sections[1]):
            text = "-" + text

    if is_zero and len(sections) > 2 and sections[2]:
        return _Picture(sections[2]).render(Decimal(0))[0]
    return text


# =============================================================================
# Entry point
# =============================================================================


def format_number(value: Number, spec: str | None = None) -> str:
    """Format a number with a standard or custom format string.

    Args:
        value: int, float or Decimal
        spec: Format string, None or empty for the default text

    Returns:
        Formatted number

    Raises:
        FormatError: If ``spec`` is a standard specifier that does not apply
            to the value's type

    Examples:
        >>> format_number(1234.5678, "N2")
        '1,234.57'
        >>> format_number(42, "D5")
        '00042'
        >>> format_number(0.125, "P1")
        '12.5 %'
        >>> format_number(1234.5, "#,##0.00")
        '1,234.50'
    """
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return NAN_SYMBOL
        return POSITIVE_INFINITY_SYMBOL if value > 0 else NEGATIVE_INFINITY_SYMBOL
    if isinstance(value, Decimal) and not value.is_finite():
        if value.is_nan():
            return NAN_SYMBOL
        return NEGATIVE_INFINITY_SYMBOL if value.is_signed() else POSITIVE_INFINITY_SYMBOL

    if not spec:
        return default_number_text(value)

    match = _STANDARD_FORMAT_RE.match(spec)
    if match:
        letter, digits = match.groups()
        return _format_standard(value, letter, int(digits) if digits else None)

    return _format_custom(value, spec)
