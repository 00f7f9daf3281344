"""External system integrations for kube-inspect."""
