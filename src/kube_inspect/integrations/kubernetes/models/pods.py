"""Derived display facts for pods.

Every helper here is a pure function of a ``V1Pod`` (plus the current time
where ages are involved). Missing or partial fields never raise; each helper
has an explicit default.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kube_inspect.integrations.kubernetes.models.base import _get_timestamp, _safe_get


class PhaseKind(Enum):
    """Coarse lifecycle state of a pod."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Phase:
    """Pod phase; ``reason`` carries the raw text of an Unknown phase."""

    kind: PhaseKind
    reason: str = ""

    _KNOWN: ClassVar[dict[str, PhaseKind]] = {
        "Pending": PhaseKind.PENDING,
        "Running": PhaseKind.RUNNING,
        "Succeeded": PhaseKind.SUCCEEDED,
    }

    @classmethod
    def parse(cls, raw: str | None) -> Phase:
        """Map raw phase text to a Phase.

        Args:
            raw: The phase text, or None when the field is absent.

        Returns:
            A known phase, or Unknown carrying the raw text.
        """
        if raw is None:
            return cls.unknown("Unknown")
        if kind := cls._KNOWN.get(raw):
            return cls(kind)
        return cls.unknown(raw)

    @classmethod
    def unknown(cls, reason: str) -> Phase:
        """Build an Unknown phase with the given reason text."""
        return cls(PhaseKind.UNKNOWN, reason)

    def __str__(self) -> str:
        if self.kind is PhaseKind.UNKNOWN:
            return self.reason
        return self.kind.value


class ContainerRuntimeStatus(BaseModel):
    """Runtime status of one container."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ready: bool = Field(default=False, description="Whether container is ready")
    restart_count: int = Field(default=0, description="Number of restarts")
    waiting_reason: str | None = Field(default=None, description="Reason while waiting")
    terminated_reason: str | None = Field(default=None, description="Reason once terminated")
    is_waiting: bool = Field(default=False, description="Whether currently waiting")
    last_terminated_at: datetime | None = Field(
        default=None, description="When the previous instance finished"
    )
    last_termination_reason: str | None = Field(
        default=None, description="Why the previous instance finished"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ContainerRuntimeStatus:
        """Create from a kubernetes V1ContainerStatus object."""
        waiting = _safe_get(obj, "state", "waiting")
        terminated = _safe_get(obj, "state", "terminated")
        return cls(
            ready=bool(getattr(obj, "ready", False)),
            restart_count=getattr(obj, "restart_count", 0) or 0,
            is_waiting=waiting is not None,
            waiting_reason=_safe_get(waiting, "reason"),
            terminated_reason=_safe_get(terminated, "reason"),
            last_terminated_at=_get_timestamp(
                _safe_get(obj, "last_state", "terminated", "finished_at")
            ),
            last_termination_reason=_safe_get(obj, "last_state", "terminated", "reason"),
        )

    @property
    def reason(self) -> str | None:
        """Reason text this container contributes to the pod phase."""
        if self.is_waiting:
            return self.waiting_reason or "unknown"
        return self.terminated_reason


class Container(BaseModel):
    """A pod container with its declared spec and optional runtime status."""

    model_config = ConfigDict(extra="ignore", frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Container name")
    image: str | None = Field(default=None, description="Container image")
    spec: Any = Field(default=None, description="Declared V1Container")
    status: ContainerRuntimeStatus | None = Field(default=None, description="Runtime status")


def _container_statuses(pod: Any) -> list[Any] | None:
    """Raw container statuses, or None when the pod has no status block."""
    status = getattr(pod, "status", None)
    if status is None:
        return None
    statuses = getattr(status, "container_statuses", None)
    return list(statuses) if statuses is not None else None


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(UTC)


def age(pod: Any, now: datetime | None = None) -> timedelta:
    """Time since the pod was created; zero if the creation time is unknown."""
    created = _get_timestamp(_safe_get(pod, "metadata", "creation_timestamp"))
    if created is None:
        return timedelta(0)
    return _now(now) - created


def format_age(delta: timedelta) -> str:
    """Render a duration in its largest whole unit (``42s``, ``5m``, ``3h``, ``2d``)."""
    seconds = max(int(delta.total_seconds()), 0)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def readiness(pod: Any) -> str:
    """Ready containers over total containers, e.g. ``2/3``."""
    statuses = _container_statuses(pod)
    if not statuses:
        return "0/0"
    ready = sum(1 for s in statuses if getattr(s, "ready", False))
    return f"{ready}/{len(statuses)}"


def restart_summary(pod: Any, now: datetime | None = None) -> str:
    """Total restarts, with the age of the most recent termination if any.

    Returns ``"5 (3m)"`` style text, or just the count when no container has
    ever terminated.
    """
    statuses = _container_statuses(pod)
    if not statuses:
        return "0"

    runtime = [ContainerRuntimeStatus.from_k8s_object(s) for s in statuses]
    total = sum(s.restart_count for s in runtime)
    finished = [s.last_terminated_at for s in runtime if s.last_terminated_at is not None]
    if not finished:
        return str(total)
    return f"{total} ({format_age(_now(now) - max(finished))})"


def phase(pod: Any) -> Phase:
    """Effective phase of a pod.

    Container-level waiting or terminated reasons (e.g. ``CrashLoopBackOff``)
    take precedence over the pod's own phase field.
    """
    status = getattr(pod, "status", None)
    if status is None:
        return Phase.unknown("")

    raw_phase = getattr(status, "phase", None)
    statuses = getattr(status, "container_statuses", None)
    if statuses is None:
        return Phase.parse(raw_phase)

    reasons = [
        reason
        for s in statuses
        if (reason := ContainerRuntimeStatus.from_k8s_object(s).reason) is not None
    ]
    if not reasons:
        return Phase.parse(raw_phase)
    return Phase.parse(", ".join(reasons))


def pod_ip(pod: Any) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """The pod's assigned address, or None if absent or unparseable."""
    raw = _safe_get(pod, "status", "pod_ip")
    if not raw:
        return None
    try:
        return ipaddress.ip_address(raw)
    except ValueError:
        return None


def containers(pod: Any, name_filter: str | None = None) -> list[Container]:
    """Declared containers with their runtime status attached.

    Args:
        pod: The pod to read.
        name_filter: Keep only containers whose name contains this text.

    Returns:
        One Container per spec container, in declaration order.
    """
    statuses = {
        getattr(s, "name", None): ContainerRuntimeStatus.from_k8s_object(s)
        for s in _container_statuses(pod) or []
    }
    result = [
        Container(
            name=getattr(spec, "name", "") or "",
            image=getattr(spec, "image", None),
            spec=spec,
            status=statuses.get(getattr(spec, "name", None)),
        )
        for spec in _safe_get(pod, "spec", "containers", default=[])
    ]
    if name_filter:
        result = [c for c in result if name_filter in c.name]
    return result
