"""Unit tests for per-value format dispatch."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from logvalues.errors import FormatError
from logvalues.formatting import format_value, to_text


class Tagged:
    """Object with its own __format__."""

    def __format__(self, spec: str) -> str:
        if spec == "bad":
            raise ValueError("unsupported")
        return f"<{spec}>"

    def __str__(self) -> str:
        return "tagged"


class Plain:
    """Object relying on object.__format__."""

    def __str__(self) -> str:
        return "plain"


class TestFormatValue:
    """Tests for format_value."""

    def test_none(self) -> None:
        """Test that None renders empty."""
        assert format_value(None) == ""
        assert format_value(None, "D2") == ""

    def test_string_ignores_spec(self) -> None:
        """Test that strings ignore the format string."""
        assert format_value("abc", "D2") == "abc"

    def test_bool_ignores_spec(self) -> None:
        """Test bool text and that it is not treated as an int."""
        assert format_value(True) == "True"
        assert format_value(False, "D3") == "False"

    def test_numbers_dispatch(self) -> None:
        """Test int, float and Decimal dispatch."""
        assert format_value(7, "D2") == "07"
        assert format_value(1.25, "F1") == "1.3"
        assert format_value(Decimal("3.14159"), "F3") == "3.142"

    def test_dates_dispatch(self) -> None:
        """Test date and datetime dispatch."""
        assert format_value(date(2024, 1, 2), "yyyy-MM-dd") == "2024-01-02"
        assert format_value(datetime(2024, 1, 2, 3, 4, 5), "s") == "2024-01-02T03:04:05"

    def test_timedelta_dispatch(self) -> None:
        """Test interval dispatch."""
        assert format_value(timedelta(hours=1)) == "01:00:00"

    def test_own_format(self) -> None:
        """Test that objects with __format__ receive the format string."""
        assert format_value(Tagged(), "abc") == "<abc>"

    def test_own_format_default_uses_str(self) -> None:
        """Test that no format string falls back to str()."""
        assert format_value(Tagged()) == "tagged"

    def test_own_format_error(self) -> None:
        """Test that a failing __format__ becomes FormatError."""
        with pytest.raises(FormatError, match="Tagged") as exc_info:
            format_value(Tagged(), "bad")

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_plain_object_ignores_spec(self) -> None:
        """Test objects without __format__ ignore the format string."""
        assert format_value(Plain(), "X4") == "plain"


class TestToText:
    """Tests for the default text conversion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("x", "x"),
            (3, "3"),
            (2.0, "2"),
            (True, "True"),
            (date(2024, 1, 2), "01/02/2024"),
        ],
    )
    def test_to_text(self, value: object, expected: str) -> None:
        """Test default text for common values."""
        assert to_text(value) == expected
