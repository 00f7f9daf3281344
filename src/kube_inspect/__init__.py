"""Interactive terminal dashboard for inspecting live Kubernetes objects."""

__version__ = "0.1.0"
