"""Integration tests for logvalues CLI commands.

These tests run each command through Typer's CliRunner from an empty
working directory, so only configuration written by the test is used.
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from logvalues import __version__
from logvalues.cli import app, parse_value

runner = CliRunner()


class TestRender:
    """Integration tests for `logvalues render`."""

    def test_render_basic(self, workdir: Path, login_template: str) -> None:
        """Test rendering a template with values."""
        result = runner.invoke(app, ["render", login_template, "42", "10.0.0.1"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "User 42 logged in from 10.0.0.1"

    def test_render_typed_values(self, workdir: Path) -> None:
        """Test that values are parsed before formatting."""
        result = runner.invoke(app, ["render", "Id {Id:D4}", "42"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Id 0042"

    def test_render_raw_values(self, workdir: Path) -> None:
        """Test that --raw keeps values as strings."""
        result = runner.invoke(app, ["render", "Id {Id:D4}", "42", "--raw"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Id 42"

    def test_render_list(self, workdir: Path) -> None:
        """Test that list values are joined."""
        result = runner.invoke(app, ["render", "Items: {Items}", "[1, 2, 3]"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Items: 1, 2, 3"

    def test_render_alignment(self, workdir: Path) -> None:
        """Test alignment in placeholders."""
        result = runner.invoke(app, ["render", "[{Name,-6}][{Count,4}]", "Bob", "7"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "[Bob   ][   7]"

    def test_render_escaped_braces(self, workdir: Path, escaped_template: str) -> None:
        """Test doubled braces in the output."""
        result = runner.invoke(app, ["render", escaped_template, "value"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "{prefix{value}suffix}"

    def test_render_negative_value(self, workdir: Path) -> None:
        """Test passing a value that starts with a dash."""
        result = runner.invoke(app, ["render", "Delta {D}", "--", "-5"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Delta -5"

    def test_render_json(self, workdir: Path) -> None:
        """Test JSON output."""
        result = runner.invoke(app, ["render", "{A} {B}", "1", "[1, 2]", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["message"] == "1 1, 2"
        assert data["values"] == [["A", 1], ["B", [1, 2]], ["{OriginalFormat}", "{A} {B}"]]

    def test_render_invalid_format(self, workdir: Path) -> None:
        """Test an unknown --format value."""
        result = runner.invoke(app, ["render", "{A}", "1", "--format", "xml"])

        assert result.exit_code == 1

    def test_render_under_supply(self, workdir: Path) -> None:
        """Test that too few values fail."""
        result = runner.invoke(app, ["render", "{A} {B}", "1"])

        assert result.exit_code == 1
        assert "Cannot render" in result.output

    def test_render_bad_format_string(self, workdir: Path) -> None:
        """Test that a format string the value does not support fails."""
        result = runner.invoke(app, ["render", "{A:D2}", "1.5"])

        assert result.exit_code == 1

    def test_render_failure_without_fail_on_error(self, workdir: Path) -> None:
        """Test that the template is printed when failures are tolerated."""
        (workdir / "logvalues.yaml").write_text("ci:\n  fail_on_error: false\n")

        result = runner.invoke(app, ["render", "{A} {B}", "1"])

        assert result.exit_code == 0, result.output
        assert "{A} {B}" in result.output.splitlines()

    def test_render_json_from_config(self, workdir: Path) -> None:
        """Test that the configured output format is used."""
        (workdir / "logvalues.yaml").write_text("output:\n  format: json\n")

        result = runner.invoke(app, ["render", "Hi {Name}", "Ann"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["message"] == "Hi Ann"

    def test_render_untyped_from_config(self, workdir: Path) -> None:
        """Test that values.typed false keeps strings."""
        (workdir / "logvalues.yaml").write_text("values:\n  typed: false\n")

        result = runner.invoke(app, ["render", "Id {Id:D4}", "42"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Id 42"

    def test_explicit_config(self, tmp_path: Path, workdir: Path) -> None:
        """Test --config with an explicit path."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("output:\n  format: json\n")

        result = runner.invoke(app, ["--config", str(config_file), "render", "{A}", "1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["message"] == "1"

    def test_invalid_config(self, workdir: Path) -> None:
        """Test that an invalid config value fails."""
        (workdir / "logvalues.yaml").write_text("logging:\n  mode: loud\n")

        result = runner.invoke(app, ["render", "{A}", "1"])

        assert result.exit_code == 1


class TestParse:
    """Integration tests for `logvalues parse`."""

    def test_parse_text(self, workdir: Path) -> None:
        """Test text output."""
        result = runner.invoke(app, ["parse", "User {UserId} from {Ip}"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "Positional format: User {0} from {1}",
            "Placeholders:",
            "  0: UserId",
            "  1: Ip",
        ]

    def test_parse_no_placeholders(self, workdir: Path) -> None:
        """Test a template without placeholders."""
        result = runner.invoke(app, ["parse", "plain text"])

        assert result.exit_code == 0, result.output
        assert "Placeholders: (none)" in result.output

    def test_parse_json(self, workdir: Path, escaped_template: str) -> None:
        """Test JSON output."""
        result = runner.invoke(app, ["parse", escaped_template, "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data == {
            "original_format": escaped_template,
            "positional_format": "{{prefix{{{0}}}suffix}}",
            "placeholder_names": ["Argument"],
        }

    def test_parse_keeps_format_suffix(self, workdir: Path) -> None:
        """Test that alignment and format suffixes stay in the positional format."""
        result = runner.invoke(app, ["parse", "{Time:HH:mm} {Count,5:D3}", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["positional_format"] == "{0:HH:mm} {1,5:D3}"
        assert data["placeholder_names"] == ["Time", "Count"]


class TestValues:
    """Integration tests for `logvalues values`."""

    def test_values_lines(self, workdir: Path) -> None:
        """Test name=value lines."""
        result = runner.invoke(app, ["values", "{A} {B}", "1", "x"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["A=1", "B=x", "{OriginalFormat}={A} {B}"]

    def test_values_json(self, workdir: Path) -> None:
        """Test JSON output."""
        result = runner.invoke(app, ["values", "{A} {B}", "1", "[2, 3]", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "A": 1,
            "B": [2, 3],
            "{OriginalFormat}": "{A} {B}",
        }

    def test_values_extra_ignored(self, workdir: Path) -> None:
        """Test that extra values are not reported."""
        result = runner.invoke(app, ["values", "{A}", "1", "2"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["A=1", "{OriginalFormat}={A}"]

    def test_values_under_supply(self, workdir: Path) -> None:
        """Test too few values."""
        result = runner.invoke(app, ["values", "{A} {B}", "1"])

        assert result.exit_code == 1
        assert "2 placeholder(s) but 1 value(s)" in result.output


class TestInit:
    """Integration tests for `logvalues init`."""

    def test_init_creates_config(self, workdir: Path) -> None:
        """Test creating the default config."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0, result.output
        assert "configuration initialized" in result.output
        assert (workdir / ".logvalues" / "config.yaml").exists()

    def test_init_refuses_overwrite(self, workdir: Path) -> None:
        """Test that an existing config is kept without --force."""
        assert runner.invoke(app, ["init"]).exit_code == 0

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1

    def test_init_force(self, workdir: Path) -> None:
        """Test overwriting with --force."""
        config_file = workdir / ".logvalues" / "config.yaml"
        config_file.parent.mkdir()
        config_file.write_text("output:\n  format: json\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0, result.output
        assert 'format: "text"' in config_file.read_text()


class TestGlobalOptions:
    """Tests for global options."""

    def test_version(self) -> None:
        """Test --version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"logvalues {__version__}"

    def test_verbose_logs_debug(self, workdir: Path) -> None:
        """Test that --verbose emits debug records."""
        result = runner.invoke(app, ["--verbose", "render", "{A}", "1"])

        assert result.exit_code == 0, result.output
        assert "Rendered {A} with 1 value(s)" in result.output


class TestParseValue:
    """Tests for CLI value parsing."""

    def test_scalars(self) -> None:
        """Test YAML scalars."""
        assert parse_value("42") == 42
        assert parse_value("1.5") == 1.5
        assert parse_value("true") is True
        assert parse_value("hello") == "hello"

    def test_collections(self) -> None:
        """Test YAML flow collections."""
        assert parse_value("[1, 2, 3]") == [1, 2, 3]
        assert parse_value("{a: 1}") == {"a": 1}

    def test_invalid_yaml_falls_back(self) -> None:
        """Test that unparsable text is returned as-is."""
        assert parse_value("a: b: c") == "a: b: c"
