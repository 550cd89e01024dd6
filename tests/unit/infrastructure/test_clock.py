"""Logical clocks never move backwards."""

from unittest.mock import patch

import pytest

from audit_registry.infrastructure.clock import ManualClock, WallClock


def test_manual_clock_advances():
    clock = ManualClock(start=10)
    assert clock.now() == 10
    assert clock.advance(5) == 15
    assert clock.now() == 15


def test_manual_clock_rejects_going_back():
    clock = ManualClock()
    with pytest.raises(ValueError):
        clock.advance(-1)
    with pytest.raises(ValueError):
        ManualClock(start=-1)


def test_wall_clock_is_clamped():
    clock = WallClock()
    with patch("audit_registry.infrastructure.clock.time.time", side_effect=[1000.5, 990.0, 1001.0]):
        assert clock.now() == 1000
        assert clock.now() == 1000
        assert clock.now() == 1001
