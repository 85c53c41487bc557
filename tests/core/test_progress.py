"""Tests for core/progress.py module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from sqlprep.core.progress import _STYLES, get_console, pluralize, status


class TestStyles:
    """Tests for _STYLES constant."""

    def test_has_expected_styles(self) -> None:
        assert set(_STYLES.keys()) == {"success", "error", "info", "warning", "none"}

    def test_success_style(self) -> None:
        assert "✓" in _STYLES["success"]

    def test_error_style(self) -> None:
        assert "✗" in _STYLES["error"]


class TestStatus:
    """Tests for status function."""

    def test_prints_message(self) -> None:
        with patch("sqlprep.core.progress._console") as mock_console:
            status("Loading package")
            mock_console.print.assert_called_once()

    def test_success_style(self) -> None:
        with patch("sqlprep.core.progress._console") as mock_console:
            status("Done", style="success")
            call_args = mock_console.print.call_args[0][0]
            assert call_args.endswith("✓[/green] Done")

    def test_with_indent(self) -> None:
        with patch("sqlprep.core.progress._console") as mock_console:
            status("Indented", indent=4, style="none")
            assert mock_console.print.call_args[0][0] == "    Indented"

    def test_unknown_style_has_no_prefix(self) -> None:
        with patch("sqlprep.core.progress._console") as mock_console:
            status("Plain", style="sparkly")
            assert mock_console.print.call_args[0][0] == "Plain"

    def test_console_writes_to_stderr(self) -> None:
        assert get_console().stderr is True


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 statements"), (1, "1 statement"), (2, "2 statements")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "statement") == expected

    def test_custom_plural(self) -> None:
        assert pluralize(3, "query", "queries") == "3 queries"
