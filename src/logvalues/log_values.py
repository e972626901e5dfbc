"""Per-call log state built from a template and its arguments.

``FormattedLogValues`` is what a logger hands to its sinks: it renders to the
display message via ``str()`` and behaves as a read-only sequence of
(name, value) pairs ending with the ``{OriginalFormat}`` pair.
"""

from collections.abc import Iterator, Sequence
from typing import Any, overload

from logvalues.formatter import ORIGINAL_FORMAT_KEY, LogValuesFormatter

# Message used when no template is supplied
NULL_FORMAT = "[null]"


class FormattedLogValues(Sequence[tuple[str, Any]]):
    """Template plus argument values for a single log call.

    A template logged without arguments is never compiled: its text is the
    message as-is, braces included.

    Attributes:
        original_format: Template text ("[null]" when None was given)
        values: Argument values in call order
    """

    def __init__(self, template: str | None, *values: Any) -> None:
        """Initialize log state.

        Args:
            template: Message template, may be None
            *values: Positional argument values
        """
        self.original_format = NULL_FORMAT if template is None else template
        self.values = values
        self._formatter = LogValuesFormatter(self.original_format) if values else None

    @property
    def formatter(self) -> LogValuesFormatter | None:
        """Compiled template, None when logged without arguments."""
        return self._formatter

    def __len__(self) -> int:
        if self._formatter is None:
            return 1
        return len(self._formatter.placeholder_names) + 1

    @overload
    def __getitem__(self, index: int) -> tuple[str, Any]: ...

    @overload
    def __getitem__(self, index: slice) -> list[tuple[str, Any]]: ...

    def __getitem__(self, index: int | slice) -> tuple[str, Any] | list[tuple[str, Any]]:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]

        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError("FormattedLogValues index out of range")
        if index == count - 1:
            return (ORIGINAL_FORMAT_KEY, self.original_format)

        assert self._formatter is not None
        return (self._formatter.placeholder_names[index], self.values[index])

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        # Under-supply raises IndexError before the first pair
        if self._formatter is None:
            return iter([(ORIGINAL_FORMAT_KEY, self.original_format)])
        return iter(self._formatter.structured_values(self.values))

    def as_dict(self) -> dict[str, Any]:
        """Return the pairs as a dict; later duplicates win.

        Raises:
            IndexError: If fewer values than placeholders were supplied
        """
        if self._formatter is None:
            return {ORIGINAL_FORMAT_KEY: self.original_format}
        return dict(self._formatter.structured_values(self.values))

    def __str__(self) -> str:
        """Render the display message.

        Raises:
            FormatError: If the arguments do not fit the template
        """
        if self._formatter is None:
            return self.original_format
        return self._formatter.render(self.values)

    def __repr__(self) -> str:
        return f"FormattedLogValues({self.original_format!r}, {len(self.values)} value(s))"
