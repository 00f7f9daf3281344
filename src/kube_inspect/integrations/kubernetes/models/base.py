"""Shared helpers for reading kubernetes SDK objects."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Safely traverse nested attributes on kubernetes SDK objects."""
    current = obj
    for attr in attrs:
        if current is None:
            return default
        current = getattr(current, attr, None)
    return current if current is not None else default


def _get_timestamp(obj: Any) -> datetime | None:
    """Normalize a datetime or ISO string to an aware UTC datetime."""
    if obj is None:
        return None
    if isinstance(obj, str):
        try:
            obj = datetime.fromisoformat(obj.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(obj, datetime):
        return None
    if obj.tzinfo is None:
        return obj.replace(tzinfo=UTC)
    return obj


def to_document(obj: Any) -> Any:
    """Convert a kubernetes SDK object to plain JSON-compatible data.

    Keys use the API's camelCase names, as in ``kubectl get -o yaml``.
    """
    from kubernetes.client import ApiClient

    return ApiClient().sanitize_for_serialization(obj)
