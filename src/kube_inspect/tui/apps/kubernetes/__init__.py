"""Kubernetes pod inspector TUI application.

This module provides an interactive terminal interface for browsing live
pods, their YAML and their logs.

Usage:
    from kube_inspect.tui.apps.kubernetes import KubernetesApp

    app = KubernetesApp(client=client)
    app.run()
"""

from kube_inspect.tui.apps.kubernetes.app import KubernetesApp

__all__ = ["KubernetesApp"]
