"""Reusable widget-tree nodes for the Kubernetes TUI.

Provides the filter input bar, the tab strip with its content
constructors, and the YAML overview tab.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import yaml

from kube_inspect.integrations.kubernetes.models import to_document
from kube_inspect.tui.apps.kubernetes.frames import FilterFrame, OverviewFrame, TabsFrame
from kube_inspect.tui.apps.kubernetes.log_viewer import LogOpener, LogView
from kube_inspect.tui.dispatch import Broadcast, Propagation, propagate
from kube_inspect.tui.events import Event, Key, Printable

# =============================================================================
# Filter Bar
# =============================================================================


class FilterBar:
    """Single-line text input with a cursor.

    Printable characters insert at the cursor, Backspace deletes before
    it, Left/Right move it. Escape and Enter close the bar.

    Args:
        text: Initial buffer contents.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        """Current buffer contents."""
        return self._text

    @property
    def cursor(self) -> int:
        """Cursor position, in ``[0, len(text)]``."""
        return self._cursor

    def dispatch(self, event: Event) -> Broadcast:
        """Edit the buffer, or exit on Escape/Enter."""
        if isinstance(event, Printable):
            self._text = self._text[: self._cursor] + event.text + self._text[self._cursor :]
            self._cursor += len(event.text)
            return Broadcast.CONSUMED
        if event is Key.BACKSPACE:
            if self._cursor > 0:
                self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
                self._cursor -= 1
            return Broadcast.CONSUMED
        if event is Key.CURSOR_LEFT:
            self._cursor = max(self._cursor - 1, 0)
            return Broadcast.CONSUMED
        if event is Key.CURSOR_RIGHT:
            self._cursor = min(self._cursor + 1, len(self._text))
            return Broadcast.CONSUMED
        if event is Key.ESCAPE or event is Key.ENTER:
            return Broadcast.EXITED
        return Broadcast.IGNORED

    def draw(self) -> FilterFrame:
        """Describe the input line."""
        return FilterFrame(text=self._text, cursor=self._cursor)

    def close(self) -> None:
        """Nothing to release."""


# =============================================================================
# Overview Tab
# =============================================================================


class OverviewView:
    """Full YAML document of a resource, scrollable with Up/Down.

    Args:
        resource: Kubernetes SDK object to describe.
    """

    def __init__(self, resource: Any) -> None:
        self._resource = resource
        self._document: str | None = None
        self._offset = 0

    @property
    def document(self) -> str:
        """YAML text of the resource, rendered on first use."""
        if self._document is None:
            self._document = yaml.safe_dump(
                to_document(self._resource),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        return self._document

    @property
    def offset(self) -> int:
        """First visible line, zero-based."""
        return self._offset

    def dispatch(self, event: Event) -> Broadcast:
        """Scroll on Up/Down."""
        if event is Key.CURSOR_DOWN:
            last = max(self.document.count("\n") - 1, 0)
            self._offset = min(self._offset + 1, last)
            return Broadcast.CONSUMED
        if event is Key.CURSOR_UP:
            self._offset = max(self._offset - 1, 0)
            return Broadcast.CONSUMED
        return Broadcast.IGNORED

    def draw(self) -> OverviewFrame:
        """Describe the document at the current scroll offset."""
        return OverviewFrame(document=self.document, offset=self._offset)

    def close(self) -> None:
        """Nothing to release."""


# =============================================================================
# Tabs
# =============================================================================


class TabId(Enum):
    """Tabs of the detail pane."""

    OVERVIEW = "Overview"
    LOGS = "Logs"


@dataclass(frozen=True)
class TabContext:
    """What tab constructors build their content from.

    Attributes:
        resource: The resource the detail pane shows.
        open_logs: Factory for log streams.
    """

    resource: Any
    open_logs: LogOpener


TabContent = OverviewView | LogView
TabConstructor = Callable[[TabContext], TabContent]


def build_overview(context: TabContext) -> OverviewView:
    """Construct the Overview tab content."""
    return OverviewView(context.resource)


def build_logs(context: TabContext) -> LogView:
    """Construct the Logs tab content, opening its stream."""
    return LogView(context.resource, context.open_logs)


TAB_CONSTRUCTORS: dict[TabId, TabConstructor] = {
    TabId.OVERVIEW: build_overview,
    TabId.LOGS: build_logs,
}

DEFAULT_TABS = (TabId.OVERVIEW, TabId.LOGS)

TAB_DIGITS = frozenset("123456789")


class TabbedView:
    """Ordered tabs with one live content instance.

    Content is built when its tab becomes active and closed when another
    tab is selected, so switching back always starts fresh. Left/Right
    cycle the tabs; digits ``1``..``9`` jump to a tab.

    Args:
        context: Passed to every tab constructor.
        tabs: Tabs in display order.
        constructors: Content constructor per tab.
    """

    def __init__(
        self,
        context: TabContext,
        tabs: Sequence[TabId] = DEFAULT_TABS,
        constructors: Mapping[TabId, TabConstructor] | None = None,
    ) -> None:
        if not tabs:
            raise ValueError("TabbedView needs at least one tab")
        self._context = context
        self._tabs = tuple(tabs)
        self._constructors = constructors if constructors is not None else TAB_CONSTRUCTORS
        self._active = 0
        self._content: TabContent | None = None
        self._build()

    @property
    def active(self) -> int:
        """Index of the active tab."""
        return self._active

    @property
    def active_tab(self) -> TabId:
        """Identifier of the active tab."""
        return self._tabs[self._active]

    @property
    def content(self) -> TabContent | None:
        """The live content instance, if built."""
        return self._content

    def _build(self) -> TabContent:
        if self._content is None:
            self._content = self._constructors[self.active_tab](self._context)
        return self._content

    def _discard(self) -> None:
        if self._content is not None:
            self._content.close()
            self._content = None

    def select(self, index: int) -> None:
        """Activate a tab by index (wrapping), replacing the live content."""
        index %= len(self._tabs)
        if index == self._active and self._content is not None:
            return
        self._discard()
        self._active = index
        self._build()

    def dispatch(self, event: Event) -> Broadcast:
        """Offer the event to the content, then handle tab switching."""
        if self._content is not None:
            result = propagate(self._content.dispatch(event))
            if result is Propagation.DETACH:
                self._discard()
                return Broadcast.CONSUMED
            if result is Propagation.STOP:
                return Broadcast.CONSUMED

        if event is Key.CURSOR_LEFT:
            self.select(self._active - 1)
            return Broadcast.CONSUMED
        if event is Key.CURSOR_RIGHT:
            self.select(self._active + 1)
            return Broadcast.CONSUMED
        if isinstance(event, Printable) and event.text in TAB_DIGITS:
            index = int(event.text) - 1
            if index < len(self._tabs):
                self.select(index)
                return Broadcast.CONSUMED
        return Broadcast.IGNORED

    def draw(self) -> TabsFrame:
        """Describe the tab strip, rebuilding content that exited."""
        return TabsFrame(
            titles=tuple(tab.value for tab in self._tabs),
            active=self._active,
            body=self._build().draw(),
        )

    def close(self) -> None:
        """Close the live content."""
        self._discard()
