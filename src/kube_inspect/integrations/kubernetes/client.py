"""Kubernetes API client wrapper.

Wraps the official kubernetes Python client with the read-only primitives
the dashboard needs: full lists, watch streams starting from a resource
version, and follow-mode log tails. All transport and API failures are
translated into the ``KubernetesError`` hierarchy.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

import structlog
from urllib3.exceptions import HTTPError, ReadTimeoutError

from kube_inspect.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesWatchExpiredError,
)
from kube_inspect.integrations.kubernetes.types import (
    CLUSTER_SCOPED_TYPES,
    ResourceKey,
    ResourceType,
    WatchEvent,
    WatchEventType,
)

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api

    from kube_inspect.integrations.kubernetes.config import ClusterConfig

logger = structlog.get_logger()

HTTP_GONE = 410

# Errors raised by urllib3 or the socket layer while a response is open
TRANSPORT_ERRORS = (HTTPError, OSError)


class LogTail:
    """An open follow-mode log stream for one container.

    Iterating yields decoded lines without their trailing newline. Closing
    the tail from another thread unblocks a pending read; iteration then
    ends quietly.
    """

    def __init__(self, response: Any, key: ResourceKey, container: str) -> None:
        """Initialize the tail.

        Args:
            response: Unread urllib3 response from ``read_namespaced_pod_log``.
            key: Pod the stream belongs to.
            container: Container the stream belongs to.
        """
        self._response = response
        self._key = key
        self._container = container
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def __iter__(self) -> Iterator[str]:
        try:
            for line in self._response:
                if self._closed:
                    return
                if isinstance(line, bytes):
                    line = line.decode("utf-8", errors="replace")
                yield str(line).rstrip("\r\n")
        except Exception as e:
            # Reads racing close() fail in version-specific ways
            if self._closed:
                return
            if isinstance(e, (*TRANSPORT_ERRORS, ValueError)):
                raise KubernetesConnectionError(
                    message=f"Log stream for {self._key}/{self._container} interrupted",
                    original_error=e,
                ) from e
            raise

    def close(self) -> None:
        """Close the underlying connection."""
        if self._closed:
            return
        self._closed = True
        if shutdown := getattr(self._response, "shutdown", None):
            shutdown()
        self._response.close()
        if release := getattr(self._response, "release_conn", None):
            release()


class KubernetesClient:
    """Read-only Kubernetes API client.

    Wraps the official kubernetes Python client with:
    - Kubeconfig context loading with in-cluster fallback
    - Lazy API group initialization
    - List, watch and log tail primitives keyed by ``ResourceType``
    - Consistent error translation to custom exceptions
    - Context manager support

    The client holds no per-call state, so one instance is shared by every
    store and log stream.

    Example:
        ```python
        from kube_inspect.integrations.kubernetes import KubernetesClient
        from kube_inspect.integrations.kubernetes.config import ClusterConfig

        with KubernetesClient(ClusterConfig()) as client:
            pods, version = client.list_resources(ResourceType.PODS)
        ```
    """

    def __init__(self, cluster_config: ClusterConfig) -> None:
        """Initialize Kubernetes client from cluster config.

        Args:
            cluster_config: Connection settings.

        Raises:
            KubernetesConnectionError: If no configuration can be loaded.
        """
        self._config = cluster_config
        self._current_context: str | None = None

        # Lazy-loaded API group instances
        self._core_v1: CoreV1Api | None = None

        self._load_config()

        logger.info(
            "Kubernetes client initialized",
            context=self._current_context,
            namespace=cluster_config.namespace,
        )

    def _load_config(self) -> None:
        """Load Kubernetes configuration from kubeconfig or in-cluster."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            config.load_kube_config(
                config_file=self._config.kubeconfig,
                context=self._config.context,
            )
            self._current_context = self._config.context or self._active_context_name()
            logger.debug(
                "loaded_kubeconfig",
                context=self._current_context,
                kubeconfig=self._config.kubeconfig,
            )
        except ConfigException:
            try:
                config.load_incluster_config()
                self._current_context = "in-cluster"
                logger.debug("loaded_incluster_config")
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration. "
                    "Ensure kubeconfig exists or running inside a cluster.",
                    original_error=e,
                ) from e

        self._core_v1 = None

    def _active_context_name(self) -> str | None:
        """Name of the kubeconfig's current context, if readable."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            _, active = config.list_kube_config_contexts(config_file=self._config.kubeconfig)
        except (ConfigException, OSError):
            return None
        if not active:
            return None
        name = active.get("name")
        return str(name) if name else None

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (pods, namespaces, nodes, logs)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api()
        return self._core_v1

    # =========================================================================
    # List / Watch
    # =========================================================================

    def _list_call(
        self,
        resource_type: ResourceType,
        namespace: str | None,
    ) -> tuple[Callable[..., Any], dict[str, Any]]:
        """Resolve the SDK list function and its scoping arguments.

        Args:
            resource_type: Type of resource to list.
            namespace: Namespace to restrict to, or None for all.

        Returns:
            The SDK function and keyword arguments for it.
        """
        if resource_type in CLUSTER_SCOPED_TYPES:
            if resource_type == ResourceType.NAMESPACES:
                return self.core_v1.list_namespace, {}
            return self.core_v1.list_node, {}

        if namespace:
            return self.core_v1.list_namespaced_pod, {"namespace": namespace}
        return self.core_v1.list_pod_for_all_namespaces, {}

    def list_resources(
        self,
        resource_type: ResourceType,
        namespace: str | None = None,
    ) -> tuple[list[Any], str | None]:
        """Fetch every object of a type.

        Args:
            resource_type: Type of resource to list.
            namespace: Namespace to restrict to, or None for all.

        Returns:
            The items and the list's resource version marker.

        Raises:
            KubernetesError: On any API or transport failure.
        """
        from kubernetes.client import ApiException

        func, kwargs = self._list_call(resource_type, namespace)
        try:
            result = func(**kwargs)
        except ApiException as e:
            raise self.translate_api_exception(
                e, resource_type=resource_type.value, namespace=namespace
            ) from e
        except TRANSPORT_ERRORS as e:
            raise self._translate_transport_error(e, f"List of {resource_type.value}") from e

        items = list(getattr(result, "items", None) or [])
        resource_version = getattr(getattr(result, "metadata", None), "resource_version", None)
        logger.debug(
            "listed_resources",
            resource_type=resource_type.value,
            count=len(items),
            resource_version=resource_version,
        )
        return items, resource_version

    def watch_resources(
        self,
        resource_type: ResourceType,
        resource_version: str | None,
        namespace: str | None = None,
        *,
        timeout_seconds: int = 60,
    ) -> Iterator[WatchEvent]:
        """Stream changes to a type starting after a resource version.

        The stream ends normally when the server-side timeout elapses.

        Args:
            resource_type: Type of resource to watch.
            resource_version: Marker returned by a list or a previous event.
            namespace: Namespace to restrict to, or None for all.
            timeout_seconds: Server-side timeout for the watch request.

        Yields:
            Watch events in the order the server sent them.

        Raises:
            KubernetesWatchExpiredError: If the resource version is too old.
            KubernetesError: On any other API or transport failure.
        """
        from kubernetes import watch
        from kubernetes.client import ApiException
        from kubernetes.watch.watch import iter_resp_lines

        func, kwargs = self._list_call(resource_type, namespace)
        decoder = watch.Watch()
        return_type = decoder.get_return_type(func)

        try:
            response = func(
                watch=True,
                resource_version=resource_version,
                timeout_seconds=timeout_seconds,
                allow_watch_bookmarks=True,
                _preload_content=False,
                **kwargs,
            )
        except ApiException as e:
            if e.status == HTTP_GONE:
                raise KubernetesWatchExpiredError(resource_version=resource_version) from e
            raise self.translate_api_exception(
                e, resource_type=resource_type.value, namespace=namespace
            ) from e
        except TRANSPORT_ERRORS as e:
            raise self._translate_transport_error(e, f"Watch of {resource_type.value}") from e

        try:
            for line in iter_resp_lines(response):
                try:
                    raw = decoder.unmarshal_event(line, return_type)
                except (ValueError, KeyError, TypeError) as e:
                    raise KubernetesError(
                        message=f"Malformed watch event for {resource_type.value}: {e}",
                        resource_type=resource_type.value,
                        namespace=namespace,
                    ) from e
                if not isinstance(raw, dict):
                    continue
                event_type = raw.get("type")
                if event_type == "ERROR":
                    raise self._watch_error(raw.get("raw_object") or {}, resource_version)
                try:
                    kind = WatchEventType(event_type)
                except ValueError:
                    logger.debug("unknown_watch_event", event_type=event_type)
                    continue
                yield WatchEvent(type=kind, object=raw.get("object"))
        except TRANSPORT_ERRORS as e:
            raise self._translate_transport_error(e, f"Watch of {resource_type.value}") from e
        finally:
            response.close()
            if release := getattr(response, "release_conn", None):
                release()

    @staticmethod
    def _watch_error(status: dict[str, Any], resource_version: str | None) -> KubernetesError:
        """Translate an ERROR watch event's Status object."""
        code = status.get("code")
        if code == HTTP_GONE:
            return KubernetesWatchExpiredError(
                message=status.get("message") or "Watch resource version expired",
                resource_version=resource_version,
            )
        return KubernetesError(
            message=status.get("message") or status.get("reason") or "Watch error",
            status_code=code,
        )

    # =========================================================================
    # Logs
    # =========================================================================

    def tail_logs(
        self,
        key: ResourceKey,
        container: str,
        *,
        tail_lines: int | None = None,
    ) -> LogTail:
        """Open a follow-mode log stream for a pod container.

        Args:
            key: Pod to stream from.
            container: Container name.
            tail_lines: Number of existing lines to start with.

        Returns:
            An open LogTail; the caller must close it.

        Raises:
            KubernetesError: If the stream cannot be opened.
        """
        from kubernetes.client import ApiException

        kwargs: dict[str, Any] = {
            "name": key.name,
            "namespace": key.namespace,
            "container": container,
            "follow": True,
            "_preload_content": False,
        }
        if tail_lines is not None:
            kwargs["tail_lines"] = tail_lines

        logger.debug("tailing_logs", pod=str(key), container=container)
        try:
            response = self.core_v1.read_namespaced_pod_log(**kwargs)
        except ApiException as e:
            raise self.translate_api_exception(
                e, resource_type="Pod", resource_name=key.name, namespace=key.namespace
            ) from e
        except TRANSPORT_ERRORS as e:
            raise self._translate_transport_error(e, f"Log stream for {key}") from e
        return LogTail(response, key, container)

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes ApiException to a custom exception.

        Args:
            e: The original ApiException.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException

        if not isinstance(e, ApiException):
            return KubernetesError(
                message=str(e),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        status = e.status

        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status == HTTP_GONE:
            return KubernetesWatchExpiredError(message=e.reason or "Resource version expired")

        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    @staticmethod
    def _translate_transport_error(e: Exception, what: str) -> KubernetesError:
        """Translate a urllib3 or socket error."""
        if isinstance(e, ReadTimeoutError | TimeoutError):
            return KubernetesTimeoutError(message=f"{what} timed out")
        return KubernetesConnectionError(message=f"{what} failed: {e}", original_error=e)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def default_namespace(self) -> str | None:
        """Namespace pods are restricted to, or None for all namespaces."""
        return self._config.namespace

    def get_current_context(self) -> str:
        """Get the current active context name.

        Returns:
            The current context name, or 'in-cluster' if running inside a pod.
        """
        return self._current_context or "unknown"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release resources."""
        self._core_v1 = None
        logger.debug("Kubernetes client closed")

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
