"""Long-running services that keep local state in sync with external systems."""
