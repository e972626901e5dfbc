"""Exceptions raised while rendering message templates.

Parsing never raises. Rendering raises FormatError when the positional
format and the supplied values do not fit together. Structured extraction
raises the builtin IndexError on under-supply; the two kinds are distinct.
"""


class FormatError(ValueError):
    """A composite format string could not be applied to its arguments.

    Attributes:
        position: Offset in the positional format where the problem was
            detected, if known
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description
            position: Offset into the format string
        """
        super().__init__(message)
        self.position = position
