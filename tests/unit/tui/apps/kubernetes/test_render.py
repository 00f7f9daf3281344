"""Unit tests for frame rendering."""

from __future__ import annotations

import io

import pytest
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kube_inspect.tui.apps.kubernetes.frames import (
    ColumnConstraint,
    DetailFrame,
    FilterFrame,
    LogFrame,
    OverviewFrame,
    ScreenFrame,
    TableFrame,
    TableRow,
    TabsFrame,
)
from kube_inspect.tui.apps.kubernetes.render import render_frame
from kube_inspect.tui.theme import RowStyle, Theme

# ============================================================================
# Helpers
# ============================================================================


def to_text(renderable: RenderableType, width: int = 120) -> str:
    """Render to plain text."""
    console = Console(file=io.StringIO(), width=width, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def table_frame(count: int, selected: int | None = 0) -> TableFrame:
    return TableFrame(
        title="Pods",
        header=("Namespace", "Name"),
        columns=(ColumnConstraint(min_width=10), ColumnConstraint(min_width=10, ratio=1)),
        rows=tuple(TableRow(cells=("default", f"pod-{i}")) for i in range(count)),
        selected=selected,
    )


@pytest.fixture
def theme() -> Theme:
    """Default theme."""
    return Theme()


# ============================================================================
# Tables
# ============================================================================


class TestRenderTable:
    """Tests for table rendering."""

    @pytest.mark.unit
    def test_headers_and_cells(self, theme: Theme) -> None:
        """All rows render under their headers."""
        rendered = render_frame(table_frame(3), theme)

        assert isinstance(rendered, Table)
        text = to_text(rendered)
        assert "Namespace" in text
        assert "Pods" in text
        for i in range(3):
            assert f"pod-{i}" in text

    @pytest.mark.unit
    def test_row_styles(self, theme: Theme) -> None:
        """Rows carry their health color; the selected one is highlighted."""
        frame = TableFrame(
            title="Pods",
            header=("Name",),
            columns=(ColumnConstraint(),),
            rows=(
                TableRow(cells=("ok",), style=RowStyle.HEALTHY),
                TableRow(cells=("bad",), style=RowStyle.UNHEALTHY),
            ),
            selected=1,
        )

        table = render_frame(frame, theme)

        assert isinstance(table, Table)
        assert table.rows[0].style == "green"
        assert table.rows[1].style == "red reverse"

    @pytest.mark.unit
    def test_empty_caption(self, theme: Theme) -> None:
        """An empty table says so."""
        text = to_text(render_frame(table_frame(0, selected=None), theme))
        assert "no pods" in text

    @pytest.mark.unit
    def test_window_keeps_selection_visible(self, theme: Theme) -> None:
        """With limited height the rows around the selection are shown."""
        # Three lines of chrome leave room for four rows
        table = render_frame(table_frame(10, selected=8), theme, height=7)

        assert isinstance(table, Table)
        assert table.row_count == 4
        text = to_text(table)
        assert "pod-8" in text
        assert "pod-5" in text
        assert "pod-4" not in text
        assert "pod-9" not in text
        assert table.rows[3].style == "white reverse"

    @pytest.mark.unit
    def test_window_from_top(self, theme: Theme) -> None:
        """A selection near the top shows the first rows."""
        table = render_frame(table_frame(10, selected=1), theme, height=7)

        assert isinstance(table, Table)
        text = to_text(table)
        assert "pod-0" in text
        assert "pod-3" in text
        assert "pod-4" not in text


# ============================================================================
# Filter, tabs and detail
# ============================================================================


class TestRenderFilter:
    """Tests for the filter line."""

    @pytest.mark.unit
    def test_text(self, theme: Theme) -> None:
        """The line shows a slash and the text."""
        text = to_text(render_frame(FilterFrame(text="abc", cursor=3), theme))
        assert text.startswith("/abc")

    @pytest.mark.unit
    def test_cursor_span(self, theme: Theme) -> None:
        """The cell under the cursor is highlighted."""
        rendered = render_frame(FilterFrame(text="abc", cursor=1), theme)
        spans = [(s.start, s.end, s.style) for s in rendered.spans]  # type: ignore[union-attr]
        assert (2, 3, "reverse") in spans


class TestRenderDetail:
    """Tests for detail, tabs and tab bodies."""

    @pytest.mark.unit
    def test_detail_panel(self, theme: Theme) -> None:
        """The panel title is the breadcrumb; the tab strip lists tabs."""
        frame = DetailFrame(
            breadcrumb=("apps", "web-1"),
            tabs=TabsFrame(
                titles=("Overview", "Logs"),
                active=0,
                body=OverviewFrame(document="kind: Pod\nmetadata:\n  name: web-1\n"),
            ),
        )

        rendered = render_frame(frame, theme)

        assert isinstance(rendered, Panel)
        text = to_text(rendered)
        assert "apps > web-1" in text
        assert "1:Overview" in text
        assert "2:Logs" in text
        assert "name: web-1" in text

    @pytest.mark.unit
    def test_overview_scrolled(self, theme: Theme) -> None:
        """The overview starts at the offset and fits the height."""
        frame = OverviewFrame(document="a: 1\nb: 2\nc: 3\nd: 4\n", offset=1)

        rendered = render_frame(frame, theme, height=2)

        assert isinstance(rendered, Syntax)
        text = to_text(rendered)
        assert "a: 1" not in text
        assert "b: 2" in text
        assert "c: 3" in text
        assert "d: 4" not in text

    @pytest.mark.unit
    def test_overview_unbounded(self, theme: Theme) -> None:
        """Without a height the rest of the document shows."""
        frame = OverviewFrame(document="a: 1\nb: 2\nc: 3\n", offset=1)
        text = to_text(render_frame(frame, theme))
        assert "b: 2" in text
        assert "c: 3" in text

    @pytest.mark.unit
    def test_log_tail(self, theme: Theme) -> None:
        """The log pane shows its header and the newest lines that fit."""
        frame = LogFrame(
            container="app",
            containers=("app", "sidecar"),
            status="streaming",
            lines=("first", "second", "third"),
        )

        text = to_text(render_frame(frame, theme, height=3))

        assert "container: app (1/2, c: next)" in text
        assert "[streaming]" in text
        assert "first" not in text
        assert "second" in text
        assert "third" in text

    @pytest.mark.unit
    def test_log_error(self, theme: Theme) -> None:
        """Stream errors show inline."""
        frame = LogFrame(container="app", containers=("app",), status="error: Pod gone")

        text = to_text(render_frame(frame, theme))

        assert "[error: Pod gone]" in text
        assert "c: next" not in text

    @pytest.mark.unit
    def test_log_no_containers(self, theme: Theme) -> None:
        """A pod without containers shows only the status."""
        frame = LogFrame(container=None, containers=(), status="no containers")
        assert to_text(render_frame(frame, theme)).strip() == "no containers"


# ============================================================================
# Screen
# ============================================================================


class TestRenderScreen:
    """Tests for whole-screen rendering."""

    @pytest.mark.unit
    def test_status_and_overlay(self, theme: Theme) -> None:
        """Body, filter line and status line all render."""
        frame = ScreenFrame(
            body=table_frame(2),
            overlay=FilterFrame(text="pod", cursor=3),
            status="2/2 pods  filter: pod",
        )

        lines = to_text(render_frame(frame, theme)).rstrip("\n").splitlines()

        assert lines[-1].startswith("2/2 pods  filter: pod")
        assert lines[-2].startswith("/pod")

    @pytest.mark.unit
    def test_unknown_frame(self, theme: Theme) -> None:
        """Unknown frame types are rejected."""
        with pytest.raises(TypeError, match="Cannot render str"):
            render_frame("not a frame", theme)  # type: ignore[arg-type]
