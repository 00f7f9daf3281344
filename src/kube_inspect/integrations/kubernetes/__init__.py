"""Kubernetes integration - API client, configuration and resource types."""

from kube_inspect.integrations.kubernetes.client import KubernetesClient, LogTail
from kube_inspect.integrations.kubernetes.config import (
    ClusterConfig,
    InspectorConfig,
    LogConfig,
    WatchConfig,
)
from kube_inspect.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesWatchExpiredError,
)
from kube_inspect.integrations.kubernetes.types import (
    ResourceKey,
    ResourceType,
    WatchEvent,
    WatchEventType,
)

__all__ = [
    "ClusterConfig",
    "InspectorConfig",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesTimeoutError",
    "KubernetesWatchExpiredError",
    "LogConfig",
    "LogTail",
    "ResourceKey",
    "ResourceType",
    "WatchConfig",
    "WatchEvent",
    "WatchEventType",
]
