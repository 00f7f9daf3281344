"""Terminal user interface for kube-inspect.

The widget tree (list, filter bar, detail pane, tabs) is plain Python
objects speaking the dispatch protocol in ``tui.dispatch``; Textual only
hosts the tree, feeds it keys and paints what it draws.

Usage:
    from kube_inspect.tui import BaseScreen, Theme
    from kube_inspect.tui.apps.kubernetes import KubernetesApp
"""

from kube_inspect.tui.base import BaseScreen
from kube_inspect.tui.theme import RowStyle, Theme

__all__ = [
    "BaseScreen",
    "RowStyle",
    "Theme",
]
