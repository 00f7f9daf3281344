"""Unit tests for the dispatch contract."""

from __future__ import annotations

import pytest

from kube_inspect.tui.dispatch import Broadcast, Propagation, propagate


class TestPropagate:
    """Tests for propagate()."""

    @pytest.mark.unit
    def test_ignored_continues(self) -> None:
        """An ignored event lets the parent try its own bindings."""
        assert propagate(Broadcast.IGNORED) is Propagation.CONTINUE

    @pytest.mark.unit
    def test_consumed_stops(self) -> None:
        """A consumed event stops propagation."""
        assert propagate(Broadcast.CONSUMED) is Propagation.STOP

    @pytest.mark.unit
    def test_exited_detaches(self) -> None:
        """An exiting child must be detached."""
        assert propagate(Broadcast.EXITED) is Propagation.DETACH
