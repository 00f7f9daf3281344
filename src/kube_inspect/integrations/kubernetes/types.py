"""Resource type definitions shared by the client, stores and views.

Kept apart from the client module so models and the TUI can import them
without pulling in the kubernetes SDK.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple


def metadata_field(obj: Any, attr: str, key: str | None = None) -> Any:
    """Read a metadata field from an SDK object or a raw API dict.

    Some watch events (bookmarks, on older clients) carry the undecoded
    dict, whose keys use the API's camelCase names.
    """
    if isinstance(obj, Mapping):
        return (obj.get("metadata") or {}).get(key or attr)
    return getattr(getattr(obj, "metadata", None), attr, None)


class ResourceType(Enum):
    """Kubernetes resource types a store can keep in sync."""

    PODS = "Pods"
    NAMESPACES = "Namespaces"
    NODES = "Nodes"


# Resource types that are cluster-scoped (not namespaced)
CLUSTER_SCOPED_TYPES = frozenset(
    {
        ResourceType.NAMESPACES,
        ResourceType.NODES,
    }
)


class ResourceKey(NamedTuple):
    """Address of a resource within its type.

    Cluster-scoped resources use the empty namespace, which keeps keys
    totally ordered.
    """

    namespace: str
    name: str

    @classmethod
    def of(cls, obj: Any) -> ResourceKey:
        """Build the key of a kubernetes SDK object."""
        return cls(
            namespace=metadata_field(obj, "namespace") or "",
            name=metadata_field(obj, "name") or "",
        )

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


class WatchEventType(Enum):
    """Event types delivered by a watch stream."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"


@dataclass(frozen=True)
class WatchEvent:
    """A single watch stream event.

    Attributes:
        type: What happened to the object.
        object: The kubernetes SDK object carried by the event.
    """

    type: WatchEventType
    object: Any

    @property
    def key(self) -> ResourceKey:
        """Key of the object the event refers to."""
        return ResourceKey.of(self.object)

    @property
    def resource_version(self) -> str | None:
        """Resource version of the carried object."""
        return metadata_field(self.object, "resource_version", "resourceVersion")
