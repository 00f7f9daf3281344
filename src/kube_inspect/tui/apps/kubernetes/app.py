"""Main Textual application for Kubernetes pod inspection.

The app owns the pod store and the root of the widget tree. Terminal
keys are translated into dispatch events for the tree; a timer repaints
the tree's frame description so store updates show up without input.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import structlog
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Static

from kube_inspect.integrations.kubernetes.config import InspectorConfig
from kube_inspect.integrations.kubernetes.types import ResourceType
from kube_inspect.services.kubernetes.store import ResourceStore
from kube_inspect.services.kubernetes.streaming_manager import LogStream
from kube_inspect.tui.apps.kubernetes.render import render_frame
from kube_inspect.tui.apps.kubernetes.screens import PodListView
from kube_inspect.tui.base import BaseScreen
from kube_inspect.tui.dispatch import Broadcast
from kube_inspect.tui.events import Resize, to_keypress
from kube_inspect.tui.theme import Theme

if TYPE_CHECKING:
    from kube_inspect.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()


class BrowserScreen(BaseScreen[None]):
    """Single full-screen frame painted from the widget tree.

    Args:
        root_view: Root of the widget tree.
        display_theme: Styles to paint with.
        frame_interval: Seconds between repaints.
    """

    DEFAULT_CSS = """
    BrowserScreen {
        layout: vertical;
    }
    #frame {
        height: 1fr;
    }
    """

    def __init__(
        self,
        root_view: PodListView,
        display_theme: Theme,
        frame_interval: float,
    ) -> None:
        super().__init__()
        self._root_view = root_view
        self._display_theme = display_theme
        self._frame_interval = frame_interval

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Static(id="frame")

    def on_mount(self) -> None:
        """Paint once, then on every tick."""
        self.refresh_frame()
        self.set_interval(self._frame_interval, self.refresh_frame)

    def refresh_frame(self) -> None:
        """Pull a frame from the tree and paint it."""
        frame_widget = self.query_one("#frame", Static)
        height = frame_widget.size.height or None
        frame_widget.update(render_frame(self._root_view.draw(), self._display_theme, height))

    def on_key(self, event: events.Key) -> None:
        """Dispatch a key to the tree; leave the app when the root exits."""
        keypress = to_keypress(event.key, event.character)
        if keypress is None:
            return
        event.stop()
        event.prevent_default()
        if self._root_view.dispatch(keypress) is Broadcast.EXITED:
            logger.debug("root_view_exited")
            self.app.exit()
            return
        self.refresh_frame()

    def on_resize(self, event: events.Resize) -> None:
        """Tell the tree about the new size and repaint."""
        self._root_view.dispatch(Resize(width=event.size.width, height=event.size.height))
        self.refresh_frame()


class KubernetesApp(App[None]):
    """TUI application for inspecting live pods.

    Args:
        client: Kubernetes API client instance.
        config: Watch, log and refresh settings.
        store: Pod store to read from; opened from ``client`` when omitted.
        display_theme: Styles to paint with.
    """

    TITLE = "kube-inspect"

    def __init__(
        self,
        client: KubernetesClient,
        config: InspectorConfig | None = None,
        *,
        store: ResourceStore | None = None,
        display_theme: Theme | None = None,
    ) -> None:
        """Initialize the pod inspector app.

        Args:
            client: Kubernetes API client for cluster communication.
            config: Application configuration.
            store: Pre-built pod store (the app takes ownership).
            display_theme: Theme built at startup.
        """
        super().__init__()
        self._client = client
        self._inspector_config = config or InspectorConfig()
        self._display_theme = display_theme or Theme()
        self._store = store
        self._root_view: PodListView | None = None

    @property
    def root_view(self) -> PodListView | None:
        """Root of the widget tree, once mounted."""
        return self._root_view

    @property
    def store(self) -> ResourceStore | None:
        """The pod store, once mounted."""
        return self._store

    def _list_title(self) -> str:
        namespace = self._inspector_config.cluster.namespace
        return f"Pods ({namespace})" if namespace else "Pods (all namespaces)"

    def on_mount(self) -> None:
        """Open the pod store and show the browser screen."""
        config = self._inspector_config
        if self._store is None:
            self._store = ResourceStore.open(
                self._client,
                ResourceType.PODS,
                namespace=config.cluster.namespace,
                watch_config=config.watch,
            )
        open_logs = partial(LogStream.open, self._client, config=config.logs)
        self._root_view = PodListView(self._store, open_logs, title=self._list_title())

        screen = BrowserScreen(self._root_view, self._display_theme, config.refresh_interval)
        self.push_screen(screen)
        screen.notify_user(f"context: {self._client.get_current_context()}")
        logger.info("app_started", namespace=config.cluster.namespace)

    def on_unmount(self) -> None:
        """Release streams and the store."""
        self.close_resources()

    def close_resources(self) -> None:
        """Close the widget tree and stop the store. Safe to call twice."""
        if self._root_view is not None:
            self._root_view.close()
        if self._store is not None:
            self._store.close()
