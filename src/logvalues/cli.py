"""logvalues CLI interface.

Commands:
- parse: Show the positional format and placeholder names of a template
- render: Render a template with values
- values: Show the structured (name, value) pairs of a template
- init: Initialize logvalues configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from logvalues import __version__
from logvalues.config import (
    VALID_OUTPUT_FORMATS,
    LogValuesConfig,
    create_default_config,
    load_config,
)
from logvalues.errors import FormatError
from logvalues.formatter import compile_template
from logvalues.formatting import to_text
from logvalues.utils.logging import LogMode, configure_from_cli, get_logger

app = typer.Typer(
    name="logvalues",
    help="Compile and render named message templates for structured logging",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: LogValuesConfig = LogValuesConfig()
_logger = get_logger("logvalues.cli")

TemplateArg = Annotated[
    str,
    typer.Argument(help='Message template, e.g. "User {UserId} logged in"'),
]
ValuesArg = Annotated[
    list[str] | None,
    typer.Argument(help="Placeholder values in order (use -- before values starting with -)"),
]
RawOption = Annotated[
    bool,
    typer.Option("--raw", help="Pass values as plain strings instead of parsing them as YAML"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"logvalues {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """logvalues - named message templates for structured logging.

    Templates use {Name[,alignment][:format]} placeholders; {{ and }} are
    literal braces.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci, mode=LogMode(_config.logging.mode))
    if _config.config_path:
        _logger.debug(f"Loaded config from: {_config.config_path}")


# =============================================================================
# Helpers
# =============================================================================


def parse_value(text: str) -> Any:
    """Parse a CLI value as YAML, falling back to the raw string.

    Examples:
        >>> parse_value("42")
        42
        >>> parse_value("[1, 2, 3]")
        [1, 2, 3]
        >>> parse_value("a: b: c")
        'a: b: c'
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def _collect_values(values: list[str] | None, raw: bool) -> list[Any]:
    items = values or []
    if raw or not _config.values.typed:
        return list(items)
    return [parse_value(item) for item in items]


def _render_failed(template: str, error: Exception) -> None:
    _logger.error(f"Cannot render template {template!r}: {error}")
    if _config.ci.fail_on_error:
        raise typer.Exit(1)
    _logger.warning("ci.fail_on_error is false; printing the template unrendered")
    typer.echo(template)


# =============================================================================
# parse command
# =============================================================================


@app.command()
def parse(
    template: TemplateArg,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Show how a template compiles.

    Prints the positional format and the placeholder names in order.
    """
    formatter = compile_template(template)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "original_format": formatter.original_format,
                    "positional_format": formatter.positional_format,
                    "placeholder_names": list(formatter.placeholder_names),
                },
                indent=2,
            )
        )
        return

    typer.echo(f"Positional format: {formatter.positional_format}")
    if not formatter.placeholder_names:
        typer.echo("Placeholders: (none)")
        return
    typer.echo("Placeholders:")
    for index, name in enumerate(formatter.placeholder_names):
        typer.echo(f"  {index}: {name}")


# =============================================================================
# render command
# =============================================================================


@app.command()
def render(
    template: TemplateArg,
    values: ValuesArg = None,
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: text or json (default from config)",
        ),
    ] = None,
    raw: RawOption = False,
) -> None:
    """Render a template with values.

    Iterable values such as [1, 2, 3] are printed comma-separated.
    """
    selected = output_format or _config.output.format
    if selected not in VALID_OUTPUT_FORMATS:
        _logger.error(f"Invalid format: {selected}. Use 'text' or 'json'")
        raise typer.Exit(1)

    args = _collect_values(values, raw)
    formatter = compile_template(template)

    try:
        message = formatter.render(args)
        pairs = formatter.structured_values(args)
    except (FormatError, IndexError) as e:
        _render_failed(template, e)
        return

    _logger.structured(
        logging.DEBUG,
        "Rendered {Template} with {ValueCount} value(s)",
        template,
        len(args),
    )

    if selected == "json":
        typer.echo(
            json.dumps(
                {"message": message, "values": [[name, value] for name, value in pairs]},
                default=str,
                indent=2,
            )
        )
    else:
        typer.echo(message)


# =============================================================================
# values command
# =============================================================================


@app.command("values")
def values_command(
    template: TemplateArg,
    values: ValuesArg = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output pairs as a JSON object",
        ),
    ] = False,
    raw: RawOption = False,
) -> None:
    """Show the structured (name, value) pairs for a template.

    The last pair is always {OriginalFormat} with the template text.
    """
    args = _collect_values(values, raw)
    formatter = compile_template(template)

    try:
        pairs = formatter.structured_values(args)
    except IndexError:
        _render_failed(
            template,
            IndexError(
                f"{len(formatter.placeholder_names)} placeholder(s) but {len(args)} value(s)"
            ),
        )
        return

    if json_output:
        typer.echo(json.dumps(dict(pairs), default=str, indent=2))
        return

    for name, value in pairs:
        typer.echo(f"{name}={to_text(value)}")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize logvalues configuration.

    Creates .logvalues/config.yaml with the default settings.
    """
    config_dir = Path(".logvalues")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    typer.echo("✅ logvalues configuration initialized")
    typer.echo(f"   Config: {config_file}")


if __name__ == "__main__":
    app()
