"""Composite views of the Kubernetes TUI.

``PodListView`` is the root of the widget tree: a live, filterable table
of pods that opens a ``DetailView`` for the selected pod. Each composite
offers an event to its open child first and only falls back to its own
bindings when the child ignored it.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from kube_inspect.integrations.kubernetes.models import (
    PhaseKind,
    age,
    format_age,
    phase,
    readiness,
    restart_summary,
)
from kube_inspect.integrations.kubernetes.types import ResourceKey
from kube_inspect.tui.apps.kubernetes.frames import (
    ColumnConstraint,
    DetailFrame,
    ScreenFrame,
    TableFrame,
    TableRow,
)
from kube_inspect.tui.apps.kubernetes.log_viewer import LogOpener, LogView
from kube_inspect.tui.apps.kubernetes.widgets import (
    FilterBar,
    OverviewView,
    TabbedView,
    TabContext,
)
from kube_inspect.tui.dispatch import Broadcast, Propagation, propagate
from kube_inspect.tui.events import Event, Key, Printable, Resize
from kube_inspect.tui.theme import RowStyle

if TYPE_CHECKING:
    from kube_inspect.services.kubernetes.store import ResourceStore

logger = structlog.get_logger()

OPEN_FILTER = Printable("/")

# Column headers with their width rules
POD_COLUMNS: tuple[tuple[str, ColumnConstraint], ...] = (
    ("Namespace", ColumnConstraint(min_width=10, ratio=2)),
    ("Name", ColumnConstraint(min_width=20, ratio=4)),
    ("Ready", ColumnConstraint(min_width=5)),
    ("Status", ColumnConstraint(min_width=10, ratio=2)),
    ("Restarts", ColumnConstraint(min_width=8)),
    ("Age", ColumnConstraint(min_width=4)),
)

_PHASE_STYLES = {
    PhaseKind.PENDING: RowStyle.NORMAL,
    PhaseKind.RUNNING: RowStyle.NORMAL,
    PhaseKind.SUCCEEDED: RowStyle.HEALTHY,
    PhaseKind.UNKNOWN: RowStyle.UNHEALTHY,
}


def pod_row(pod: Any, now: datetime | None = None) -> TableRow:
    """Build the table row for a pod.

    Args:
        pod: Kubernetes V1Pod.
        now: Reference time for ages; defaults to the current time.

    Returns:
        Cells in ``POD_COLUMNS`` order, styled by phase.
    """
    now = now or datetime.now(UTC)
    key = ResourceKey.of(pod)
    pod_phase = phase(pod)
    return TableRow(
        cells=(
            key.namespace,
            key.name,
            readiness(pod),
            str(pod_phase),
            restart_summary(pod, now),
            format_age(age(pod, now)),
        ),
        style=_PHASE_STYLES[pod_phase.kind],
    )


def matches(pod: Any, text: str) -> bool:
    """Case-sensitive substring test of ``text`` against the pod name."""
    return text in ResourceKey.of(pod).name


# =============================================================================
# Detail View
# =============================================================================


class DetailView:
    """Modal detail pane of one resource.

    Events go to the tabs first. Escape leaves the pane; every other
    keypress is swallowed so nothing underneath reacts while it is open.

    Args:
        resource: The resource to describe.
        open_logs: Factory for log streams.
    """

    def __init__(self, resource: Any, open_logs: LogOpener) -> None:
        self._resource = resource
        self._key = ResourceKey.of(resource)
        self._tabs = TabbedView(TabContext(resource=resource, open_logs=open_logs))

    @property
    def key(self) -> ResourceKey:
        """Key of the described resource."""
        return self._key

    @property
    def tabs(self) -> TabbedView:
        """The tab strip."""
        return self._tabs

    @property
    def breadcrumb(self) -> tuple[str, ...]:
        """Path to the resource: namespace, then name."""
        if self._key.namespace:
            return (self._key.namespace, self._key.name)
        return (self._key.name,)

    def dispatch(self, event: Event) -> Broadcast:
        """Route to the tabs, then handle Escape; swallow other keys."""
        result = propagate(self._tabs.dispatch(event))
        if result is Propagation.STOP:
            return Broadcast.CONSUMED
        if result is Propagation.DETACH:
            return Broadcast.EXITED

        if event is Key.ESCAPE:
            return Broadcast.EXITED
        if isinstance(event, Resize):
            return Broadcast.IGNORED
        return Broadcast.CONSUMED

    def draw(self) -> DetailFrame:
        """Describe the breadcrumb and the tabs."""
        return DetailFrame(breadcrumb=self.breadcrumb, tabs=self._tabs.draw())

    def close(self) -> None:
        """Close the tabs and any live log stream."""
        self._tabs.close()


# =============================================================================
# Pod List View
# =============================================================================


class PodListView:
    """Root view: a filterable, navigable table of pods.

    Bindings:
        Up/Down: move the selection
        /: open the filter bar (live filtering while it is open)
        Enter: open the detail pane for the selected pod
        Escape: leave the application

    Args:
        store: Pod store to read snapshots from.
        open_logs: Factory for log streams, passed down to detail panes.
        title: Table title.
        clock: Returns the current time; used for ages.
    """

    def __init__(
        self,
        store: ResourceStore,
        open_logs: LogOpener,
        *,
        title: str = "Pods",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._open_logs = open_logs
        self._title = title
        self._clock = clock or (lambda: datetime.now(UTC))
        self._filter_bar: FilterBar | None = None
        self._filter_text = ""
        self._selection: int | None = None
        self._detail: DetailView | None = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def filter_text(self) -> str:
        """Text the list is filtered by: the open bar's, else the committed one."""
        if self._filter_bar is not None:
            return self._filter_bar.text
        return self._filter_text

    @property
    def filter_bar(self) -> FilterBar | None:
        """The open filter bar, if any."""
        return self._filter_bar

    @property
    def detail(self) -> DetailView | None:
        """The open detail pane, if any."""
        return self._detail

    @property
    def selection(self) -> int | None:
        """Selected index into the visible pods, clamped to the current count."""
        self._revalidate(len(self.visible()))
        return self._selection

    def visible(self) -> tuple[Any, ...]:
        """Pods in the current snapshot that pass the filter."""
        snapshot = self._store.snapshot()
        text = self.filter_text
        if not text:
            return snapshot
        return tuple(pod for pod in snapshot if matches(pod, text))

    def _revalidate(self, count: int) -> None:
        if count == 0:
            self._selection = None
        elif self._selection is None:
            self._selection = 0
        else:
            self._selection = min(self._selection, count - 1)

    def _move(self, delta: int, count: int) -> None:
        self._revalidate(count)
        if self._selection is not None:
            self._selection = min(max(self._selection + delta, 0), count - 1)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, event: Event) -> Broadcast:
        """Offer the event to the filter bar, then the detail pane, then handle it."""
        if self._filter_bar is not None:
            result = propagate(self._filter_bar.dispatch(event))
            if result is Propagation.DETACH:
                self._commit_filter()
                return Broadcast.CONSUMED
            if result is Propagation.STOP:
                return Broadcast.CONSUMED

        if self._detail is not None:
            result = propagate(self._detail.dispatch(event))
            if result is Propagation.DETACH:
                self._close_detail()
                return Broadcast.CONSUMED
            if result is Propagation.STOP:
                return Broadcast.CONSUMED

        return self._handle(event)

    def _handle(self, event: Event) -> Broadcast:
        if isinstance(event, Resize):
            return Broadcast.IGNORED

        if event is Key.ESCAPE:
            return Broadcast.EXITED
        if event == OPEN_FILTER:
            self._filter_bar = FilterBar()
            return Broadcast.CONSUMED

        visible = self.visible()
        if event is Key.CURSOR_UP:
            self._move(-1, len(visible))
            return Broadcast.CONSUMED
        if event is Key.CURSOR_DOWN:
            self._move(1, len(visible))
            return Broadcast.CONSUMED
        if event is Key.ENTER:
            self._revalidate(len(visible))
            if self._selection is None:
                return Broadcast.IGNORED
            self._open_detail(visible[self._selection])
            return Broadcast.CONSUMED
        return Broadcast.IGNORED

    def _commit_filter(self) -> None:
        if self._filter_bar is None:
            return
        self._filter_text = self._filter_bar.text
        self._filter_bar.close()
        self._filter_bar = None
        logger.debug("filter_committed", filter=self._filter_text)

    def _open_detail(self, resource: Any) -> None:
        self._close_detail()
        self._detail = DetailView(resource, self._open_logs)
        logger.debug("detail_opened", pod=str(self._detail.key))

    def _close_detail(self) -> None:
        if self._detail is not None:
            self._detail.close()
            self._detail = None

    # =========================================================================
    # Drawing
    # =========================================================================

    def draw(self) -> ScreenFrame:
        """Describe the table (or open detail), filter line and status line."""
        total = len(self._store)
        visible = self.visible()
        self._revalidate(len(visible))

        body: TableFrame | DetailFrame
        if self._detail is not None:
            body = self._detail.draw()
        else:
            now = self._clock()
            body = TableFrame(
                title=self._title,
                header=tuple(name for name, _ in POD_COLUMNS),
                columns=tuple(constraint for _, constraint in POD_COLUMNS),
                rows=tuple(pod_row(pod, now) for pod in visible),
                selected=self._selection,
            )

        overlay = self._filter_bar.draw() if self._filter_bar is not None else None
        return ScreenFrame(body=body, overlay=overlay, status=self._status(len(visible), total))

    def _status(self, shown: int, total: int) -> str:
        status = f"{shown}/{total} pods"
        if self.filter_text:
            status += f"  filter: {self.filter_text}"
        return status

    def close(self) -> None:
        """Close the detail pane and filter bar."""
        self._close_detail()
        if self._filter_bar is not None:
            self._filter_bar.close()
            self._filter_bar = None


# Every kind of node in the widget tree
Node = PodListView | FilterBar | DetailView | TabbedView | OverviewView | LogView
