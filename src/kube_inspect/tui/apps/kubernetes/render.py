"""Paint frame descriptions as rich renderables.

``render_frame`` is the only place that knows how frames look. When the
available height is known, tables keep the selected row in view and log
panes show the newest lines that fit.
"""

from __future__ import annotations

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from kube_inspect.tui.apps.kubernetes.frames import (
    DetailFrame,
    FilterFrame,
    Frame,
    LogFrame,
    OverviewFrame,
    ScreenFrame,
    TableFrame,
    TabsFrame,
)
from kube_inspect.tui.theme import Theme

# Lines a table spends on its title, header and header rule
TABLE_CHROME = 3
# Lines a detail panel spends on its border and tab strip
DETAIL_CHROME = 3
# Lines the log pane spends on its header
LOG_CHROME = 1


def render_frame(frame: Frame, theme: Theme, height: int | None = None) -> RenderableType:
    """Render any frame.

    Args:
        frame: Frame description from a node's ``draw()``.
        theme: Styles to paint with.
        height: Lines available, or None for unbounded output.

    Returns:
        A rich renderable.

    Raises:
        TypeError: If the frame type is unknown.
    """
    if isinstance(frame, ScreenFrame):
        return render_screen(frame, theme, height)
    if isinstance(frame, TableFrame):
        return render_table(frame, theme, height)
    if isinstance(frame, DetailFrame):
        return render_detail(frame, theme, height)
    if isinstance(frame, TabsFrame):
        return render_tabs(frame, theme, height)
    if isinstance(frame, FilterFrame):
        return render_filter(frame, theme)
    if isinstance(frame, OverviewFrame):
        return render_overview(frame, theme, height)
    if isinstance(frame, LogFrame):
        return render_log(frame, theme, height)
    raise TypeError(f"Cannot render {type(frame).__name__}")


def _remaining(height: int | None, used: int) -> int | None:
    if height is None:
        return None
    return max(height - used, 1)


def render_screen(frame: ScreenFrame, theme: Theme, height: int | None = None) -> RenderableType:
    """Body, then the filter line if open, then the status line."""
    parts: list[RenderableType] = []
    reserved = 1 + (1 if frame.overlay is not None else 0)
    parts.append(render_frame(frame.body, theme, _remaining(height, reserved)))
    if frame.overlay is not None:
        parts.append(render_filter(frame.overlay, theme))
    parts.append(Text(frame.status, style=theme.muted, no_wrap=True))
    return Group(*parts)


def render_table(frame: TableFrame, theme: Theme, height: int | None = None) -> Table:
    """Table with per-row health colors and the selected row highlighted."""
    table = Table(
        title=frame.title,
        title_style=theme.title,
        header_style=theme.header,
        box=box.SIMPLE_HEAD,
        expand=True,
        show_edge=False,
        pad_edge=False,
    )
    for name, constraint in zip(frame.header, frame.columns, strict=True):
        table.add_column(
            name,
            min_width=constraint.min_width,
            ratio=constraint.ratio,
            no_wrap=True,
            overflow="ellipsis",
        )

    rows = frame.rows
    selected = frame.selected
    room = _remaining(height, TABLE_CHROME)
    if room is not None and len(rows) > room:
        start = 0
        if selected is not None and selected >= room:
            start = selected - room + 1
        rows = rows[start : start + room]
        selected = selected - start if selected is not None else None

    for index, row in enumerate(rows):
        style = theme.row(row.style)
        if index == selected:
            style = f"{style} {theme.selected}"
        table.add_row(*row.cells, style=style)

    if not frame.rows:
        table.caption = "no pods"
        table.caption_style = theme.muted
    return table


def render_filter(frame: FilterFrame, theme: Theme) -> Text:
    """``/text`` with the cursor cell highlighted."""
    before = frame.text[: frame.cursor]
    at = frame.text[frame.cursor : frame.cursor + 1] or " "
    after = frame.text[frame.cursor + 1 :]
    return Text.assemble("/", before, (at, theme.selected), after, no_wrap=True)


def render_tabs(frame: TabsFrame, theme: Theme, height: int | None = None) -> RenderableType:
    """Tab strip above the active tab's content."""
    strip = Text(no_wrap=True)
    for index, title in enumerate(frame.titles):
        style = theme.selected if index == frame.active else theme.muted
        strip.append(f" {index + 1}:{title} ", style=style)
        strip.append(" ")
    return Group(strip, render_frame(frame.body, theme, _remaining(height, 1)))


def render_detail(frame: DetailFrame, theme: Theme, height: int | None = None) -> Panel:
    """Bordered panel titled with the breadcrumb."""
    return Panel(
        render_tabs(frame.tabs, theme, _remaining(height, DETAIL_CHROME - 1)),
        title=Text(" > ".join(frame.breadcrumb), style=theme.title),
        title_align="left",
        border_style=theme.border,
        height=height,
    )


def render_overview(frame: OverviewFrame, theme: Theme, height: int | None = None) -> Syntax:
    """YAML with syntax highlighting from the scroll offset down."""
    start = frame.offset + 1
    end = frame.offset + height if height is not None else None
    return Syntax(
        frame.document,
        "yaml",
        theme=theme.syntax_theme,
        line_range=(start, end),
        background_color="default",
    )


def render_log(frame: LogFrame, theme: Theme, height: int | None = None) -> RenderableType:
    """Container header plus the newest buffered lines that fit."""
    header = Text(no_wrap=True)
    if frame.container is None:
        header.append(frame.status, style=theme.muted)
        return header

    position = frame.containers.index(frame.container) + 1
    header.append(f"container: {frame.container}", style=theme.title)
    if len(frame.containers) > 1:
        header.append(f" ({position}/{len(frame.containers)}, c: next)", style=theme.muted)
    status_style = theme.error if frame.status.startswith("error") else theme.muted
    header.append(f"  [{frame.status}]", style=status_style)

    lines = frame.lines
    room = _remaining(height, LOG_CHROME)
    if room is not None:
        lines = lines[-room:]
    return Group(header, Text("\n".join(lines), no_wrap=True))
