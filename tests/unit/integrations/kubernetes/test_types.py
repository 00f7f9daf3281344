"""Unit tests for Kubernetes resource types."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from kube_inspect.integrations.kubernetes.types import (
    CLUSTER_SCOPED_TYPES,
    ResourceKey,
    ResourceType,
    WatchEvent,
    WatchEventType,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestResourceType:
    """Tests for ResourceType enum."""

    def test_cluster_scoped(self) -> None:
        """Namespaces and nodes are cluster-scoped; pods are not."""
        assert ResourceType.NAMESPACES in CLUSTER_SCOPED_TYPES
        assert ResourceType.NODES in CLUSTER_SCOPED_TYPES
        assert ResourceType.PODS not in CLUSTER_SCOPED_TYPES


@pytest.mark.unit
@pytest.mark.kubernetes
class TestResourceKey:
    """Tests for ResourceKey."""

    def test_of_pod(self, pod_factory: Callable[..., Any]) -> None:
        """Keys come from metadata."""
        assert ResourceKey.of(pod_factory("web-1", "apps")) == ResourceKey("apps", "web-1")

    def test_of_cluster_scoped(self) -> None:
        """Objects without a namespace get the empty namespace."""
        from kubernetes.client import V1Node, V1ObjectMeta

        node = V1Node(metadata=V1ObjectMeta(name="node-a"))
        assert ResourceKey.of(node) == ResourceKey("", "node-a")

    def test_of_raw_dict(self) -> None:
        """Undecoded API dicts are supported."""
        raw = {"metadata": {"name": "web-1", "namespace": "apps"}}
        assert ResourceKey.of(raw) == ResourceKey("apps", "web-1")

    def test_ordering(self) -> None:
        """Keys sort by namespace, then name."""
        keys = [ResourceKey("b", "a"), ResourceKey("a", "z"), ResourceKey("a", "b")]
        assert sorted(keys) == [ResourceKey("a", "b"), ResourceKey("a", "z"), ResourceKey("b", "a")]

    def test_str(self) -> None:
        """Namespaced keys render as namespace/name."""
        assert str(ResourceKey("apps", "web-1")) == "apps/web-1"
        assert str(ResourceKey("", "node-a")) == "node-a"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestWatchEvent:
    """Tests for WatchEvent."""

    def test_key_and_version(self, pod_factory: Callable[..., Any]) -> None:
        """The event exposes its object's key and resource version."""
        event = WatchEvent(WatchEventType.ADDED, pod_factory("web-1", resource_version="12"))
        assert event.key == ResourceKey("default", "web-1")
        assert event.resource_version == "12"

    def test_raw_bookmark_version(self) -> None:
        """Bookmarks carrying raw dicts still expose their version."""
        event = WatchEvent(
            WatchEventType.BOOKMARK, {"kind": "Pod", "metadata": {"resourceVersion": "99"}}
        )
        assert event.resource_version == "99"
