"""Log streaming for Kubernetes pod containers.

Provides a bounded, thread-fed line buffer over a follow-mode log tail so
the UI can read the latest lines without blocking on the network.
"""

from __future__ import annotations

import threading
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Any

from kube_inspect.integrations.kubernetes.config import LogConfig
from kube_inspect.integrations.kubernetes.exceptions import KubernetesError
from kube_inspect.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from kube_inspect.integrations.kubernetes.client import KubernetesClient, LogTail
    from kube_inspect.integrations.kubernetes.types import ResourceKey


class LogStreamState(Enum):
    """Lifecycle of a log stream."""

    CONNECTING = "connecting"
    STREAMING = "streaming"
    ENDED = "ended"
    ERROR = "error"
    CLOSED = "closed"


class LogStream(K8sBaseManager):
    """Live tail of one container's log.

    A reader thread appends lines to a ring buffer of ``buffer_lines``
    entries; ``lines()`` returns a copy. Closing the stream closes the HTTP
    response, which unblocks and ends the reader.

    Args:
        client: Kubernetes API client.
        key: Pod to stream from.
        container: Container name.
        config: Tail and buffer sizes.
    """

    _entity_name = "logs"

    def __init__(
        self,
        client: KubernetesClient,
        key: ResourceKey,
        container: str,
        config: LogConfig | None = None,
    ) -> None:
        super().__init__(client)
        self._key = key
        self._container = container
        self._config = config or LogConfig()
        self._lines: deque[str] = deque(maxlen=self._config.buffer_lines)
        self._lock = threading.Lock()
        self._tail: LogTail | None = None
        self._state = LogStreamState.CONNECTING
        self._error: str | None = None
        self._thread: threading.Thread | None = None
        self._log = self._log.bind(pod=str(key), container=container)

    @classmethod
    def open(
        cls,
        client: KubernetesClient,
        key: ResourceKey,
        container: str,
        config: LogConfig | None = None,
    ) -> LogStream:
        """Create a stream and start reading in the background."""
        stream = cls(client, key, container, config)
        stream.start()
        return stream

    @property
    def container(self) -> str:
        """Container being streamed."""
        return self._container

    @property
    def state(self) -> LogStreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def error(self) -> str | None:
        """Error message when the stream failed."""
        return self._error

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._state is LogStreamState.CLOSED

    @property
    def status(self) -> str:
        """Short status text for display."""
        if self._state is LogStreamState.ERROR:
            return f"error: {self._error}"
        return self._state.value

    def lines(self) -> tuple[str, ...]:
        """Buffered lines, oldest first."""
        with self._lock:
            return tuple(self._lines)

    def start(self) -> None:
        """Start the reader thread (idempotent)."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name=f"logs-{self._key.name}-{self._container}",
            daemon=True,
        )
        self._thread.start()

    def close(self) -> None:
        """Stop streaming and release the connection. Safe to call twice."""
        with self._lock:
            if self._state is LogStreamState.CLOSED:
                return
            self._state = LogStreamState.CLOSED
            tail = self._tail
        if tail is not None:
            tail.close()
        self._log.debug("log_stream_closed")

    def __enter__(self) -> LogStream:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def _set_state(self, state: LogStreamState, error: str | None = None) -> None:
        with self._lock:
            if self._state is LogStreamState.CLOSED:
                return
            self._state = state
            self._error = error

    def _run(self) -> None:
        try:
            tail = self._client.tail_logs(
                self._key, self._container, tail_lines=self._config.tail_lines
            )
        except KubernetesError as e:
            self._log.warning("log_stream_open_failed", error=str(e))
            self._set_state(LogStreamState.ERROR, e.message)
            return

        with self._lock:
            closed_early = self._state is LogStreamState.CLOSED
            if not closed_early:
                self._tail = tail
                self._state = LogStreamState.STREAMING
        if closed_early:
            tail.close()
            return

        self._log.debug("log_stream_started")
        try:
            for line in tail:
                with self._lock:
                    self._lines.append(line)
        except KubernetesError as e:
            self._log.warning("log_stream_failed", error=str(e))
            self._set_state(LogStreamState.ERROR, e.message)
        else:
            self._set_state(LogStreamState.ENDED)
        finally:
            tail.close()
