"""Logging configuration for kube_inspect."""

from kube_inspect.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
