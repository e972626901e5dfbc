"""logvalues configuration system.

Configuration is YAML-based with CLI flags as per-run overrides.
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.logvalues/config.yaml
3. ./logvalues.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# =============================================================================
# Configuration Dataclasses
# =============================================================================

VALID_OUTPUT_FORMATS = frozenset({"text", "json"})
VALID_LOG_MODES = frozenset({"human", "verbose", "json"})


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        format: How rendered messages are printed (text, json)
    """

    format: str = "text"

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.format}. Valid: {sorted(VALID_OUTPUT_FORMATS)}"
            )


@dataclass
class ValuesConfig:
    """How CLI argument values are interpreted.

    Attributes:
        typed: Parse each value as a YAML scalar or flow collection
            ("42" -> int, "[1, 2]" -> list); plain strings otherwise
    """

    typed: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration.

    Attributes:
        mode: Output mode (human, verbose, json)
    """

    mode: str = "human"

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if self.mode not in VALID_LOG_MODES:
            raise ValueError(f"Invalid log mode: {self.mode}. Valid: {sorted(VALID_LOG_MODES)}")


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        fail_on_error: Exit with an error code when a template cannot be rendered
    """

    fail_on_error: bool = True


@dataclass
class LogValuesConfig:
    """Top-level configuration.

    Attributes:
        output: Output format
        values: Argument value parsing
        logging: Logging mode
        ci: CI/CD settings
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    values: ValuesConfig = field(default_factory=ValuesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${LOG_FORMAT} -> value of LOG_FORMAT

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_RE.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


def parse_bool(value: Any, setting: str) -> bool:
    """Read a boolean setting.

    Strings (typically from ${VAR} substitution) are parsed as YAML, so
    "false", "no" and "off" are False.

    Args:
        value: Raw setting value
        setting: Dotted setting name for error messages

    Returns:
        Boolean value

    Raises:
        ValueError: If the value is not a boolean
    """
    if isinstance(value, str):
        try:
            value = yaml.safe_load(value)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid boolean for {setting}: {value!r}") from e
    if not isinstance(value, bool):
        raise ValueError(f"Invalid boolean for {setting}: {value!r}")
    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.logvalues/config.yaml
    2. ./logvalues.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".logvalues" / "config.yaml",
        start_path / "logvalues.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> LogValuesConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        LogValuesConfig instance

    Raises:
        ValueError: If a setting has an invalid value
    """
    data = substitute_env_vars(data)

    config = LogValuesConfig()

    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(
            format=output_data.get("format", config.output.format),
        )

    if "values" in data:
        values_data = data["values"] or {}
        config.values = ValuesConfig(
            typed=parse_bool(values_data.get("typed", config.values.typed), "values.typed"),
        )

    if "logging" in data:
        logging_data = data["logging"] or {}
        config.logging = LoggingConfig(
            mode=logging_data.get("mode", config.logging.mode),
        )

    if "ci" in data:
        ci_data = data["ci"] or {}
        config.ci = CIConfig(
            fail_on_error=parse_bool(
                ci_data.get("fail_on_error", config.ci.fail_on_error), "ci.fail_on_error"
            ),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> LogValuesConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        LogValuesConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = LogValuesConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return """# logvalues configuration

# How `logvalues render` prints its result
output:
  format: "text"   # text, json

# Parse CLI values as YAML ("42" -> 42, "[1, 2]" -> list)
values:
  typed: true

logging:
  mode: "human"    # human, verbose, json

# CI/CD settings
ci:
  fail_on_error: true
"""
