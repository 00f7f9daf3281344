"""TUI applications package.

This package contains complete TUI applications built with Textual.

Available applications:
- kubernetes: Live pod browser with filter, detail and log panes
"""
