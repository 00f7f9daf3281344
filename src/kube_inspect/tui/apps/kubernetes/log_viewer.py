"""Log tab content for pod log streaming.

Streams one container at a time; ``c`` switches to the next container of
a multi-container pod, closing the previous stream first.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from kube_inspect.integrations.kubernetes.models import containers
from kube_inspect.integrations.kubernetes.types import ResourceKey
from kube_inspect.tui.apps.kubernetes.frames import LogFrame
from kube_inspect.tui.dispatch import Broadcast
from kube_inspect.tui.events import Event, Printable

if TYPE_CHECKING:
    from kube_inspect.services.kubernetes.streaming_manager import LogStream

logger = structlog.get_logger()

# Opens a live log stream for (pod key, container name)
LogOpener = Callable[[ResourceKey, str], "LogStream"]

NEXT_CONTAINER = Printable("c")


class LogView:
    """Live log tail of a pod's containers.

    The stream for the first container opens on construction; the view
    owns it until ``close()``.

    Args:
        resource: Pod to stream logs from.
        open_logs: Factory for log streams.
    """

    def __init__(self, resource: Any, open_logs: LogOpener) -> None:
        self._key = ResourceKey.of(resource)
        self._containers = tuple(c.name for c in containers(resource))
        self._open_logs = open_logs
        self._index = 0
        self._stream: LogStream | None = None
        self._open_stream()

    @property
    def container(self) -> str | None:
        """Name of the container being streamed."""
        if not self._containers:
            return None
        return self._containers[self._index]

    @property
    def stream(self) -> LogStream | None:
        """The open stream, if any."""
        return self._stream

    def _open_stream(self) -> None:
        container = self.container
        if container is None:
            return
        logger.debug("opening_log_view", pod=str(self._key), container=container)
        self._stream = self._open_logs(self._key, container)

    def _close_stream(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def next_container(self) -> None:
        """Switch to the next container, wrapping around."""
        if len(self._containers) < 2:
            return
        self._close_stream()
        self._index = (self._index + 1) % len(self._containers)
        self._open_stream()

    def dispatch(self, event: Event) -> Broadcast:
        """Handle ``c``; everything else is left to the parent."""
        if event == NEXT_CONTAINER and self._containers:
            self.next_container()
            return Broadcast.CONSUMED
        return Broadcast.IGNORED

    def draw(self) -> LogFrame:
        """Describe the current buffer and stream status."""
        if self._stream is None:
            return LogFrame(container=None, containers=self._containers, status="no containers")
        return LogFrame(
            container=self.container,
            containers=self._containers,
            status=self._stream.status,
            lines=self._stream.lines(),
        )

    def close(self) -> None:
        """Close the open stream."""
        self._close_stream()
