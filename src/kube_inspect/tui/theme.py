"""Display theme for the kube-inspect TUI.

A ``Theme`` is built once at startup and handed to the renderer, so every
style decision lives in one value instead of scattered module constants.

Usage:
    from kube_inspect.tui.theme import RowStyle, Theme

    theme = Theme()
    style = theme.row(RowStyle.UNHEALTHY)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RowStyle(Enum):
    """Health classification of a table row."""

    NORMAL = "normal"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class Theme:
    """Rich style strings used when painting frames.

    Attributes:
        row_normal: Rows of pending or running resources.
        row_healthy: Rows of resources that completed successfully.
        row_unhealthy: Rows of resources in an unknown or failing state.
        selected: Added to the selected row's style.
        header: Table header cells.
        title: Panel and table titles.
        border: Panel borders.
        muted: Status lines and placeholders.
        error: Inline error text.
        syntax_theme: Pygments theme name for YAML highlighting.
    """

    row_normal: str = "white"
    row_healthy: str = "green"
    row_unhealthy: str = "red"
    selected: str = "reverse"
    header: str = "bold cyan"
    title: str = "bold"
    border: str = "blue"
    muted: str = "dim"
    error: str = "bold red"
    syntax_theme: str = "monokai"

    def row(self, style: RowStyle) -> str:
        """Style string for a row classification."""
        if style is RowStyle.HEALTHY:
            return self.row_healthy
        if style is RowStyle.UNHEALTHY:
            return self.row_unhealthy
        return self.row_normal
