"""Kubernetes services: resource stores and log streams."""

from kube_inspect.services.kubernetes.store import ResourceStore
from kube_inspect.services.kubernetes.streaming_manager import LogStream

__all__ = ["LogStream", "ResourceStore"]
