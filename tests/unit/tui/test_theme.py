"""Unit tests for TUI theme module."""

from __future__ import annotations

import dataclasses

import pytest

from kube_inspect.tui.theme import RowStyle, Theme


class TestTheme:
    """Tests for Theme."""

    @pytest.mark.unit
    def test_row_styles(self) -> None:
        """Each row classification has its own color."""
        theme = Theme()
        assert theme.row(RowStyle.NORMAL) == "white"
        assert theme.row(RowStyle.HEALTHY) == "green"
        assert theme.row(RowStyle.UNHEALTHY) == "red"

    @pytest.mark.unit
    def test_custom_colors(self) -> None:
        """Row colors come from the theme instance."""
        theme = Theme(row_unhealthy="magenta")
        assert theme.row(RowStyle.UNHEALTHY) == "magenta"

    @pytest.mark.unit
    def test_syntax_theme_default(self) -> None:
        """YAML is highlighted with a dark theme by default."""
        assert Theme().syntax_theme == "monokai"

    @pytest.mark.unit
    def test_frozen(self) -> None:
        """Themes cannot be changed after startup."""
        theme = Theme()
        with pytest.raises(dataclasses.FrozenInstanceError):
            theme.row_normal = "blue"  # type: ignore[misc]
