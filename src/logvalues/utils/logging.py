"""Logging setup and the template-aware logger.

Provides three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] message
- CI/JSON mode: {"level":"...","ts":"...","msg":"...", ...placeholder values}

``TemplateLogger.structured`` logs a message template with positional
arguments. The rendered text becomes the record message and the
(name, value) pairs travel with the record for JSON output.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

from logvalues.log_values import FormattedLogValues


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


def _is_tty(stream: TextIO | None = None) -> bool:
    """Check if the stream is a TTY (supports colors)."""
    if stream is None:
        stream = sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


class HumanFormatter(logging.Formatter):
    """Formatter for human-readable output.

    Format: [LEVEL] message
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        level_name = record.levelname

        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
            return f"{color}[{level_name}]{Colors.RESET} {record.getMessage()}"
        return f"[{level_name}] {record.getMessage()}"


class VerboseFormatter(logging.Formatter):
    """Formatter for verbose output with timestamps.

    Format: [LEVEL][HH:MM:SS] message
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with timestamp."""
        level_name = record.levelname
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
            return f"{color}[{level_name}]{Colors.RESET}[{timestamp}] {record.getMessage()}"
        return f"[{level_name}][{timestamp}] {record.getMessage()}"


# Keys written by JSONFormatter itself
RESERVED_JSON_KEYS = frozenset({"level", "ts", "msg"})


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable).

    Format: {"level":"INFO","ts":"2026-01-31T19:45:23+00:00","msg":"...", ...}

    Structured values attached by ``TemplateLogger.structured`` are merged in
    as extra keys. A placeholder named like a reserved key is written as
    ``arg.<name>``. Values that are not JSON types are written as strings.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "msg": record.getMessage(),
        }

        if hasattr(record, "extra_data"):
            for key, value in record.extra_data.items():
                if key in RESERVED_JSON_KEYS:
                    key = f"arg.{key}"
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class TemplateLogger(logging.Logger):
    """Logger with support for named message templates."""

    def structured(self, level: int, template: str | None, *args: Any) -> None:
        """Log a message template with positional arguments.

        Example:
            logger.structured(logging.INFO, "User {UserId} logged in", 42)

        A template that cannot be rendered with its arguments is logged
        verbatim and a warning describing the failure follows it. This covers
        a mismatched template as well as a value whose text conversion raises;
        nothing is raised to the caller.

        Args:
            level: Log level
            template: Message template with named placeholders
            *args: Values for the placeholders, in order
        """
        if not self.isEnabledFor(level):
            return

        state = FormattedLogValues(template, *args)
        try:
            message = str(state)
            extra_data = state.as_dict()
        except Exception as e:
            self._emit(level, state.original_format, None)
            self._emit(
                logging.WARNING,
                f"Log template {state.original_format!r} could not be rendered "
                f"with {len(args)} argument(s): {e}",
                None,
            )
            return

        self._emit(level, message, extra_data)

    def _emit(self, level: int, message: str, extra_data: dict[str, Any] | None) -> None:
        record = self.makeRecord(
            self.name,
            level,
            "(unknown)",
            0,
            message,
            (),
            None,
        )
        if extra_data:
            record.extra_data = extra_data  # type: ignore[attr-defined]
        self.handle(record)


logging.setLoggerClass(TemplateLogger)


def get_logger(name: str = "logvalues") -> TemplateLogger:
    """Get a template-aware logger.

    Args:
        name: Logger name

    Returns:
        TemplateLogger instance
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure logging with the specified mode.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)
    """
    logger = logging.getLogger("logvalues")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    output = stream or sys.stderr
    use_colors = _is_tty(output)

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    elif mode == LogMode.VERBOSE:
        formatter = VerboseFormatter(use_colors=use_colors)
    else:
        formatter = HumanFormatter(use_colors=use_colors)

    handler = logging.StreamHandler(output)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
    mode: LogMode | None = None,
) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable verbose mode with timestamps
        quiet: Suppress info messages (warnings and errors only)
        ci: Enable JSON output for CI/CD
        mode: Mode from configuration, used when no flag overrides it
    """
    if ci:
        selected = LogMode.JSON
    elif verbose:
        selected = LogMode.VERBOSE
    else:
        selected = mode or LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=selected, level=level)
