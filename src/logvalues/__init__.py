"""logvalues - Named message templates for structured logging.

Compiles templates such as ``"User {UserId} logged in from {IpAddress}"``
into a positional format plus the ordered placeholder names, then renders
them as display text or as (name, value) pairs for structured sinks.

Core principles:
- Parsing never fails: malformed braces degrade to literal text
- Rendering is locale-invariant
- Compiled templates are immutable and thread-safe
"""

from logvalues.errors import FormatError
from logvalues.formatter import ORIGINAL_FORMAT_KEY, LogValuesFormatter, compile_template
from logvalues.log_values import FormattedLogValues

__version__ = "0.1.0"
__author__ = "logvalues Contributors"

__all__ = [
    "ORIGINAL_FORMAT_KEY",
    "FormatError",
    "FormattedLogValues",
    "LogValuesFormatter",
    "compile_template",
]
