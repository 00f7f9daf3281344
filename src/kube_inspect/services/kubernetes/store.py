"""Watch-backed local cache of one Kubernetes resource type.

A ``ResourceStore`` seeds itself with a full list, then follows a watch
stream from the list's resource version. Readers get an immutable snapshot
that the background thread replaces wholesale on every change, so a read
never blocks on the network and never sees a half-applied update.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_when_event_set,
    wait_exponential,
)

from kube_inspect.integrations.kubernetes.config import WatchConfig
from kube_inspect.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesWatchExpiredError,
)
from kube_inspect.integrations.kubernetes.types import (
    ResourceKey,
    ResourceType,
    WatchEvent,
    WatchEventType,
    metadata_field,
)
from kube_inspect.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from kube_inspect.integrations.kubernetes.client import KubernetesClient


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time state of a store.

    Attributes:
        items: Latest known object per key (read-only).
        ordered: The same objects sorted by (namespace, name).
        resource_version: Marker of the last list or event applied.
    """

    items: Mapping[ResourceKey, Any]
    ordered: tuple[Any, ...]
    resource_version: str | None = None

    @classmethod
    def build(cls, items: dict[ResourceKey, Any], resource_version: str | None) -> Snapshot:
        """Freeze a freshly built mapping into a snapshot.

        The caller hands over ownership of ``items`` and must not mutate it.
        """
        ordered = tuple(items[key] for key in sorted(items))
        return cls(
            items=MappingProxyType(items),
            ordered=ordered,
            resource_version=resource_version,
        )


EMPTY_SNAPSHOT = Snapshot.build({}, None)


def _version_number(obj: Any) -> int | None:
    try:
        return int(metadata_field(obj, "resource_version", "resourceVersion"))
    except (TypeError, ValueError):
        return None


def _is_older(incoming: Any, existing: Any) -> bool:
    """Whether ``incoming`` is a strictly older version than ``existing``.

    Resource versions are opaque; they are only compared when both parse
    as integers, which is the case for etcd-backed API servers.
    """
    new, old = _version_number(incoming), _version_number(existing)
    if new is None or old is None:
        return False
    return new < old


class ResourceStore(K8sBaseManager):
    """Thread-safe, always-readable cache of one resource type.

    Example:
        ```python
        with ResourceStore.open(client, ResourceType.PODS) as pods:
            for pod in pods.snapshot():
                print(pod.metadata.name)
        ```

    Args:
        client: Kubernetes API client.
        resource_type: Type of resource to keep in sync.
        namespace: Namespace to restrict to, or None for all.
        watch_config: Watch timeout and retry backoff settings.
    """

    _entity_name = "store"

    def __init__(
        self,
        client: KubernetesClient,
        resource_type: ResourceType = ResourceType.PODS,
        *,
        namespace: str | None = None,
        watch_config: WatchConfig | None = None,
    ) -> None:
        super().__init__(client)
        self._resource_type = resource_type
        self._namespace = namespace
        self._watch_config = watch_config or WatchConfig()
        self._wait = wait_exponential(
            multiplier=self._watch_config.backoff_min,
            min=self._watch_config.backoff_min,
            max=self._watch_config.backoff_max,
        )
        self._published = EMPTY_SNAPSHOT
        self._write_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._log = self._log.bind(resource_type=resource_type.value, namespace=namespace)

    @classmethod
    def open(
        cls,
        client: KubernetesClient,
        resource_type: ResourceType = ResourceType.PODS,
        *,
        namespace: str | None = None,
        watch_config: WatchConfig | None = None,
    ) -> ResourceStore:
        """Create a store and start its background subscription.

        Returns immediately; the snapshot is empty until the first list
        completes.
        """
        store = cls(client, resource_type, namespace=namespace, watch_config=watch_config)
        store.start()
        return store

    @property
    def resource_type(self) -> ResourceType:
        """Type of resource this store holds."""
        return self._resource_type

    @property
    def running(self) -> bool:
        """Whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    # =========================================================================
    # Reads
    # =========================================================================

    def snapshot(self) -> tuple[Any, ...]:
        """Current objects sorted by (namespace, name). Never blocks."""
        return self._published.ordered

    def current(self) -> Snapshot:
        """The full snapshot in effect right now."""
        return self._published

    def get(self, key: ResourceKey) -> Any | None:
        """Latest known object for a key, or None."""
        return self._published.items.get(key)

    def __len__(self) -> int:
        return len(self._published.items)

    # =========================================================================
    # Writes
    # =========================================================================

    def relist(self) -> str | None:
        """Replace the whole state with a fresh full list.

        Returns:
            The list's resource version marker.

        Raises:
            KubernetesError: If the list fails; the previous state is kept.
        """
        items, resource_version = self._client.list_resources(
            self._resource_type, self._namespace
        )
        fresh = {ResourceKey.of(obj): obj for obj in items}
        with self._write_lock:
            self._published = Snapshot.build(fresh, resource_version)
        self._log.debug("relisted", count=len(fresh), resource_version=resource_version)
        return resource_version

    def apply(self, event: WatchEvent) -> None:
        """Apply one watch event and publish the resulting snapshot.

        Events carrying a version older than the one already held for the
        same key are dropped.
        """
        with self._write_lock:
            current = self._published
            resource_version = event.resource_version or current.resource_version

            if event.type is WatchEventType.BOOKMARK:
                self._published = replace(current, resource_version=resource_version)
                return

            key = event.key
            existing = current.items.get(key)
            if existing is not None and _is_older(event.object, existing):
                self._log.debug(
                    "stale_event_dropped",
                    key=str(key),
                    event_type=event.type.value,
                    resource_version=event.resource_version,
                )
                return

            items = dict(current.items)
            if event.type is WatchEventType.DELETED:
                items.pop(key, None)
            else:
                items[key] = event.object
            self._published = Snapshot.build(items, resource_version)

    # =========================================================================
    # Background subscription
    # =========================================================================

    def start(self) -> None:
        """Start the background subscription thread (idempotent)."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name=f"store-{self._resource_type.value.lower()}",
            daemon=True,
        )
        self._thread.start()

    def close(self, timeout: float | None = 1.0) -> None:
        """Stop the subscription.

        The thread notices at its next event, backoff wakeup or watch
        timeout; the last snapshot stays readable.

        Args:
            timeout: Seconds to wait for the thread to finish.
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._log.debug("store_closed")

    def __enter__(self) -> ResourceStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def _run(self) -> None:
        self._log.info("store_started")
        while not self._stop.is_set():
            try:
                for attempt in self._retrying():
                    with attempt:
                        self._sync()
            except KubernetesError as e:
                # Only reached when close() interrupted a backoff wait
                self._log.debug("retry_abandoned", error=str(e))
            except Exception:
                self._log.exception(
                    "sync_crashed",
                    retry_in=self._watch_config.backoff_max,
                )
                self._stop.wait(self._watch_config.backoff_max)
        self._log.info("store_stopped")

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(KubernetesError),
            wait=self._backoff,
            stop=stop_when_event_set(self._stop),
            sleep=self._stop.wait,
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _backoff(self, retry_state: RetryCallState) -> float:
        """Seconds to wait before the next attempt.

        The first expired marker of a sequence relists right away; repeated
        expiries back off like any other failure.
        """
        outcome = retry_state.outcome
        if (
            retry_state.attempt_number == 1
            and outcome is not None
            and isinstance(outcome.exception(), KubernetesWatchExpiredError)
        ):
            return 0.0
        return float(self._wait(retry_state))

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        sleep = retry_state.next_action.sleep if retry_state.next_action else 0
        if isinstance(error, KubernetesWatchExpiredError):
            self._log.info(
                "watch_expired_relisting",
                attempt=retry_state.attempt_number,
                retry_in=round(sleep, 2),
            )
            return
        self._log.warning(
            "sync_failed_retrying",
            attempt=retry_state.attempt_number,
            retry_in=round(sleep, 2),
            error=str(error),
        )

    def _sync(self) -> None:
        """Relist, then follow the watch until it breaks or the store closes.

        A watch that breaks after delivering events returns normally so the
        caller starts over with a fresh backoff sequence; one that breaks
        before delivering anything raises.
        """
        if self._stop.is_set():
            return
        resource_version = self.relist()
        delivered = 0
        while not self._stop.is_set():
            try:
                for event in self._client.watch_resources(
                    self._resource_type,
                    resource_version,
                    self._namespace,
                    timeout_seconds=self._watch_config.timeout_seconds,
                ):
                    if self._stop.is_set():
                        return
                    self.apply(event)
                    delivered += 1
                    resource_version = event.resource_version or resource_version
            except KubernetesError as e:
                if not delivered:
                    raise
                self._log.info(
                    "watch_interrupted",
                    delivered=delivered,
                    error=str(e),
                )
                return
