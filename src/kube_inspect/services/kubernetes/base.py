"""Base class for Kubernetes-backed services.

Provides shared infrastructure for the services that hold a client and
run background work on its behalf.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from kube_inspect.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()


class K8sBaseManager:
    """Base class for Kubernetes services.

    Provides shared concerns for all services:
    - Client reference
    - Structured logging with entity binding

    Subclasses set ``_entity_name`` for structured log context.

    Example:
        >>> class ResourceStore(K8sBaseManager):
        ...     _entity_name = "store"
    """

    _entity_name: str = ""

    def __init__(self, client: KubernetesClient) -> None:
        """Initialize the service.

        Args:
            client: Kubernetes API client instance.
        """
        self._client = client
        self._log = logger.bind(entity=self._entity_name)
