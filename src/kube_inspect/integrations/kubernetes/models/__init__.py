"""Display-oriented views of kubernetes SDK objects."""

from kube_inspect.integrations.kubernetes.models.base import to_document
from kube_inspect.integrations.kubernetes.models.pods import (
    Container,
    ContainerRuntimeStatus,
    Phase,
    PhaseKind,
    age,
    containers,
    format_age,
    phase,
    pod_ip,
    readiness,
    restart_summary,
)

__all__ = [
    "Container",
    "ContainerRuntimeStatus",
    "Phase",
    "PhaseKind",
    "age",
    "containers",
    "format_age",
    "phase",
    "pod_ip",
    "readiness",
    "restart_summary",
    "to_document",
]
