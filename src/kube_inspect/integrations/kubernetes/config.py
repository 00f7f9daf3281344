"""Kubernetes integration configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ClusterConfig(BaseModel):
    """Configuration for the cluster connection."""

    model_config = ConfigDict(extra="forbid")

    context: str | None = None
    kubeconfig: str | None = None
    namespace: str | None = None

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        if v is None:
            return v
        return str(Path(v).expanduser())

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str | None) -> str | None:
        """Treat an empty namespace as all namespaces."""
        return v or None


class WatchConfig(BaseModel):
    """Settings for the list+watch synchronization of resource stores."""

    model_config = ConfigDict(extra="forbid")

    timeout_seconds: int = 60
    backoff_min: float = 0.5
    backoff_max: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v

    @field_validator("backoff_min", "backoff_max")
    @classmethod
    def validate_backoff(cls, v: float) -> float:
        """Validate backoff bounds are positive."""
        if v <= 0:
            raise ValueError("backoff bounds must be positive")
        return v

    @model_validator(mode="after")
    def validate_backoff_order(self) -> WatchConfig:
        """Validate the backoff lower bound does not exceed the upper bound."""
        if self.backoff_min > self.backoff_max:
            raise ValueError("backoff_min must not exceed backoff_max")
        return self


class LogConfig(BaseModel):
    """Settings for live log tailing."""

    model_config = ConfigDict(extra="forbid")

    tail_lines: int = 200
    buffer_lines: int = 2000

    @field_validator("tail_lines")
    @classmethod
    def validate_tail_lines(cls, v: int) -> int:
        """Validate tail_lines is non-negative."""
        if v < 0:
            raise ValueError("tail_lines must be non-negative")
        return v

    @field_validator("buffer_lines")
    @classmethod
    def validate_buffer_lines(cls, v: int) -> int:
        """Validate buffer_lines is positive."""
        if v <= 0:
            raise ValueError("buffer_lines must be positive")
        return v


class InspectorConfig(BaseModel):
    """Complete kube-inspect configuration."""

    model_config = ConfigDict(extra="forbid")

    cluster: ClusterConfig = ClusterConfig()
    watch: WatchConfig = WatchConfig()
    logs: LogConfig = LogConfig()
    refresh_interval: float = 0.25

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        """Validate refresh interval is positive."""
        if v <= 0:
            raise ValueError("refresh_interval must be positive")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> InspectorConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            KUBE_INSPECT_CONTEXT: Kubeconfig context to use
            KUBE_INSPECT_NAMESPACE: Restrict pods to one namespace
            KUBE_INSPECT_KUBECONFIG: Kubeconfig path
            KUBE_INSPECT_WATCH_TIMEOUT: Server-side watch timeout in seconds
            KUBE_INSPECT_LOG_TAIL: Log lines fetched when a stream opens
            KUBE_INSPECT_REFRESH: Seconds between frames
        """
        config_dict = base_config.copy() if base_config else {}

        # Ensure nested dicts exist
        for section in ("cluster", "watch", "logs"):
            config_dict[section] = dict(config_dict.get(section) or {})

        if context := os.environ.get("KUBE_INSPECT_CONTEXT"):
            config_dict["cluster"]["context"] = context

        if namespace := os.environ.get("KUBE_INSPECT_NAMESPACE"):
            config_dict["cluster"]["namespace"] = namespace

        if kubeconfig := os.environ.get("KUBE_INSPECT_KUBECONFIG"):
            config_dict["cluster"]["kubeconfig"] = kubeconfig

        if timeout := os.environ.get("KUBE_INSPECT_WATCH_TIMEOUT"):
            config_dict["watch"]["timeout_seconds"] = int(timeout)

        if tail := os.environ.get("KUBE_INSPECT_LOG_TAIL"):
            config_dict["logs"]["tail_lines"] = int(tail)

        if refresh := os.environ.get("KUBE_INSPECT_REFRESH"):
            config_dict["refresh_interval"] = float(refresh)

        return cls.model_validate(config_dict)
