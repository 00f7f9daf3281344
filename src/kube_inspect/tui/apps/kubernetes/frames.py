"""Frame descriptions produced by the widget tree.

A frame is an immutable description of what a node wants on screen. Nodes
build frames in ``draw()``; ``render.render_frame`` turns them into rich
renderables. Nothing here knows about Textual or rich.
"""

from __future__ import annotations

from dataclasses import dataclass

from kube_inspect.tui.theme import RowStyle


@dataclass(frozen=True)
class ColumnConstraint:
    """Width rules for one table column.

    Attributes:
        min_width: Cells never shrink below this many characters.
        ratio: Share of the remaining width, or None for content width.
    """

    min_width: int = 0
    ratio: int | None = None


@dataclass(frozen=True)
class TableRow:
    """One table row: display cells plus its health classification."""

    cells: tuple[str, ...]
    style: RowStyle = RowStyle.NORMAL


@dataclass(frozen=True)
class TableFrame:
    """A titled table with an optional selected row.

    Attributes:
        title: Table title.
        header: Column header cells.
        columns: One constraint per header cell.
        rows: Rows in display order.
        selected: Index into ``rows`` of the selected row, if any.
    """

    title: str
    header: tuple[str, ...]
    columns: tuple[ColumnConstraint, ...]
    rows: tuple[TableRow, ...]
    selected: int | None = None


@dataclass(frozen=True)
class FilterFrame:
    """The filter input line with its cursor position."""

    text: str
    cursor: int


@dataclass(frozen=True)
class OverviewFrame:
    """A YAML document scrolled to ``offset`` lines from the top."""

    document: str
    offset: int = 0


@dataclass(frozen=True)
class LogFrame:
    """Buffered log lines of one container.

    Attributes:
        container: Container being streamed, or None when the pod has none.
        containers: All container names, in declaration order.
        status: Stream status text (streaming, ended, error: ...).
        lines: Buffered lines, oldest first.
    """

    container: str | None
    containers: tuple[str, ...]
    status: str
    lines: tuple[str, ...] = ()


TabBody = OverviewFrame | LogFrame


@dataclass(frozen=True)
class TabsFrame:
    """Tab titles, the active tab and the active tab's content."""

    titles: tuple[str, ...]
    active: int
    body: TabBody


@dataclass(frozen=True)
class DetailFrame:
    """Detail pane of one resource.

    Attributes:
        breadcrumb: Path to the resource, outermost first (namespace, name).
        tabs: The tab strip and active content.
    """

    breadcrumb: tuple[str, ...]
    tabs: TabsFrame


@dataclass(frozen=True)
class ScreenFrame:
    """Everything on screen for one refresh.

    Attributes:
        body: The table, or the detail pane when one is open.
        overlay: The filter line while the filter bar is open.
        status: Status line text under the body.
    """

    body: TableFrame | DetailFrame
    overlay: FilterFrame | None = None
    status: str = ""


Frame = ScreenFrame | TableFrame | DetailFrame | TabsFrame | FilterFrame | OverviewFrame | LogFrame
