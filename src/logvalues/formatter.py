"""Named message template compiler.

Converts templates with named format items such as
``"User {UserId} logged in from {IpAddress}"`` into a positional composite
format (``"User {0} logged in from {1}"``) plus the ordered list of names,
then renders the template either as a display string or as structured
(name, value) pairs for log sinks.

Format item syntax: ``{name[,alignment][:formatString]}``. ``{{`` and ``}}``
are escaped literal braces.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from logvalues.formatting import format_composite, to_text

# Key of the pair carrying the unparsed template in structured output
ORIGINAL_FORMAT_KEY = "{OriginalFormat}"

# Separator used when an iterable argument is flattened for display
ENUMERABLE_SEPARATOR = ", "


def find_brace_index(text: str, brace: str, start: int, end: int) -> int:
    """Find the next unescaped brace in ``text[start:end]``.

    A run of consecutive braces with even length is an escape sequence and
    is skipped. For an odd run, ``{`` resolves to the last brace of the run
    and ``}`` to the first one, so ``{{{Name}}}`` yields a literal brace, the
    placeholder and another literal brace.

    Args:
        text: Template text
        brace: Either "{" or "}"
        start: First index to scan
        end: Index to stop at (exclusive)

    Returns:
        Index of the brace, or ``end`` if there is none

    Examples:
        >>> find_brace_index("{{a}} {b}", "{", 0, 9)
        6
        >>> find_brace_index("{{a}}", "{", 0, 5)
        5
    """
    brace_index = end
    run_length = 0
    scan_index = start

    while scan_index < end:
        char = text[scan_index]
        if run_length > 0 and char != brace:
            if run_length % 2 == 0:
                # Escaped pair(s), keep looking
                run_length = 0
                brace_index = end
            else:
                break
        elif char == brace:
            if brace == "}":
                if run_length == 0:
                    brace_index = scan_index
            else:
                brace_index = scan_index
            run_length += 1

        scan_index += 1

    return brace_index


def find_index_of(text: str, char: str, start: int, end: int) -> int:
    """Return the first index of ``char`` in ``text[start:end]``, or ``end``."""
    index = text.find(char, start, end)
    return end if index == -1 else index


def is_enumerable(value: Any) -> bool:
    """Return True for iterable values that are not text."""
    return isinstance(value, Iterable) and not isinstance(value, str)


def join_enumerable(value: Iterable[Any]) -> str:
    """Join the non-None items of ``value`` with ``", "``."""
    return ENUMERABLE_SEPARATOR.join(to_text(item) for item in value if item is not None)


class LogValuesFormatter:
    """A compiled message template.

    Immutable after construction, so one instance can be rendered from many
    threads at once.

    Attributes:
        original_format: Template exactly as supplied
        positional_format: Template with each name replaced by its ordinal
        placeholder_names: Names in order of appearance, repeats included
    """

    __slots__ = ("_original_format", "_positional_format", "_placeholder_names")

    def __init__(self, template: str) -> None:
        """Parse ``template``.

        Never raises for malformed templates: an unmatched brace is kept as
        literal text.

        Args:
            template: Message template with named format items
        """
        parts: list[str] = []
        names: list[str] = []
        scan_index = 0
        end_index = len(template)

        while scan_index < end_index:
            open_index = find_brace_index(template, "{", scan_index, end_index)
            close_index = find_brace_index(template, "}", open_index, end_index)

            if close_index == end_index:
                parts.append(template[scan_index:end_index])
                break

            # {name[,alignment][:formatString]}
            delimiter_index = find_index_of(template, ",", open_index, close_index)
            if delimiter_index == close_index:
                delimiter_index = find_index_of(template, ":", open_index, close_index)

            parts.append(template[scan_index : open_index + 1])
            parts.append(str(len(names)))
            parts.append(template[delimiter_index : close_index + 1])
            names.append(template[open_index + 1 : delimiter_index])

            scan_index = close_index + 1

        self._original_format = template
        self._positional_format = "".join(parts)
        self._placeholder_names = tuple(names)

    @property
    def original_format(self) -> str:
        """Template exactly as supplied."""
        return self._original_format

    @property
    def positional_format(self) -> str:
        """Composite format with ordinal indexes in place of names."""
        return self._positional_format

    @property
    def placeholder_names(self) -> tuple[str, ...]:
        """Placeholder names in order of appearance."""
        return self._placeholder_names

    def render(self, values: Sequence[Any] | None = None) -> str:
        """Render the template as a display string.

        Iterable arguments other than strings are flattened to a
        comma-separated list first. The caller's sequence is not modified.

        Args:
            values: Positional argument values

        Returns:
            Rendered message

        Raises:
            FormatError: If a placeholder has no value or a format string
                does not apply to its value
        """
        args = [] if values is None else list(values)
        for index, value in enumerate(args):
            if is_enumerable(value):
                args[index] = join_enumerable(value)

        return format_composite(self._positional_format, args)

    def structured_values(self, values: Sequence[Any] | None = None) -> list[tuple[str, Any]]:
        """Pair each placeholder name with its raw value.

        The last pair is always ``("{OriginalFormat}", original_format)``.

        Args:
            values: Positional argument values

        Returns:
            List of (name, value) pairs

        Raises:
            IndexError: If fewer values than placeholders are supplied
        """
        args: Sequence[Any] = () if values is None else values
        pairs = [(name, args[index]) for index, name in enumerate(self._placeholder_names)]
        pairs.append((ORIGINAL_FORMAT_KEY, self._original_format))
        return pairs

    def __repr__(self) -> str:
        return f"LogValuesFormatter({self._original_format!r})"


def compile_template(template: str) -> LogValuesFormatter:
    """Compile ``template`` into a reusable formatter."""
    return LogValuesFormatter(template)
