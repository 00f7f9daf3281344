"""Shared pytest fixtures for kube_inspect tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
import typer
from kubernetes.client import (
    V1Container,
    V1ContainerState,
    V1ContainerStateTerminated,
    V1ContainerStateWaiting,
    V1ContainerStatus,
    V1ObjectMeta,
    V1Pod,
    V1PodSpec,
    V1PodStatus,
)
from typer.testing import CliRunner

from kube_inspect.cli.main import app

# Fixed reference time for age computations
NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("KUBE_INSPECT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def container_status_factory() -> Callable[..., V1ContainerStatus]:
    """Build V1ContainerStatus objects with sensible defaults."""

    def _make(
        name: str = "app",
        *,
        ready: bool = True,
        restart_count: int = 0,
        waiting: bool = False,
        waiting_reason: str | None = None,
        terminated_reason: str | None = None,
        last_finished_at: datetime | None = None,
    ) -> V1ContainerStatus:
        state = V1ContainerState()
        if waiting:
            state = V1ContainerState(waiting=V1ContainerStateWaiting(reason=waiting_reason))
        elif terminated_reason is not None:
            state = V1ContainerState(
                terminated=V1ContainerStateTerminated(exit_code=1, reason=terminated_reason)
            )
        last_state = None
        if last_finished_at is not None:
            last_state = V1ContainerState(
                terminated=V1ContainerStateTerminated(
                    exit_code=1, reason="Error", finished_at=last_finished_at
                )
            )
        return V1ContainerStatus(
            name=name,
            ready=ready,
            restart_count=restart_count,
            image=f"{name}:latest",
            image_id=f"docker://{name}",
            state=state,
            last_state=last_state,
        )

    return _make


@pytest.fixture
def pod_factory() -> Callable[..., V1Pod]:
    """Build V1Pod objects with sensible defaults."""

    def _make(
        name: str = "web-1",
        namespace: str = "default",
        *,
        phase: str | None = "Running",
        containers: Sequence[str] = ("app",),
        statuses: Sequence[V1ContainerStatus] | None = None,
        resource_version: str | None = "1",
        created: datetime | None = None,
        pod_ip: str | None = None,
        with_status: bool = True,
        labels: dict[str, str] | None = None,
    ) -> V1Pod:
        status = None
        if with_status:
            status = V1PodStatus(
                phase=phase,
                container_statuses=list(statuses) if statuses is not None else None,
                pod_ip=pod_ip,
            )
        return V1Pod(
            api_version="v1",
            kind="Pod",
            metadata=V1ObjectMeta(
                name=name,
                namespace=namespace,
                resource_version=resource_version,
                creation_timestamp=created,
                labels=labels,
            ),
            spec=V1PodSpec(
                containers=[V1Container(name=c, image=f"{c}:latest") for c in containers]
            ),
            status=status,
        )

    return _make


@pytest.fixture
def fake_log_stream_factory() -> Callable[..., Any]:
    """Build stand-ins for LogStream that record how they were opened."""

    def _make(key: Any, container: str) -> MagicMock:
        stream = MagicMock()
        stream.key = key
        stream.container = container
        stream.status = "streaming"
        stream.lines.return_value = (f"{container} line 1", f"{container} line 2")
        return stream

    return _make
