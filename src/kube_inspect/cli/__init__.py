"""Command-line entry point for kube-inspect."""
