"""The dispatch contract between a widget and its parent.

Each node answers ``dispatch(event)`` with a Broadcast. A parent turns a
child's answer into a Propagation decision with ``propagate`` and, on
DETACH, closes and drops the child itself before returning.

Usage:
    result = propagate(child.dispatch(event))
    if result is Propagation.DETACH:
        child.close()
        child = None
        return Broadcast.CONSUMED
    if result is Propagation.STOP:
        return Broadcast.CONSUMED
    # CONTINUE: try own bindings
"""

from __future__ import annotations

from enum import Enum


class Broadcast(Enum):
    """What a node did with an event."""

    IGNORED = "ignored"
    CONSUMED = "consumed"
    EXITED = "exited"


class Propagation(Enum):
    """What the parent should do next."""

    CONTINUE = "continue"
    STOP = "stop"
    DETACH = "detach"


def propagate(result: Broadcast) -> Propagation:
    """Map a child's Broadcast to the parent's next step."""
    if result is Broadcast.IGNORED:
        return Propagation.CONTINUE
    if result is Broadcast.CONSUMED:
        return Propagation.STOP
    return Propagation.DETACH
