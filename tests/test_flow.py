"""Tests for the fixed-tick flow animator."""

import pytest

from lane_balance.geometry.primitives import FlowElement, FlowPath
from lane_balance.simulation.flow import FlowAnimator

PATH = FlowPath(id="p", points=((0.0, 0.0), (100.0, 0.0)), length=100.0)


def _animator(speed=2.0, offset=0.0, **kwargs):
    element = FlowElement(id="e", path_id="p", offset=offset, speed=speed,
                          radius=1.0, x=offset, y=0.0)
    return FlowAnimator((PATH,), (element,), **kwargs)


def test_whole_ticks_only():
    animator = _animator()
    assert animator.advance(49) == 0
    assert animator.offsets() == {"e": 0.0}
    assert animator.advance(1) == 1
    assert animator.offsets()["e"] == pytest.approx(2.0)


def test_partial_tick_carries_over():
    animator = _animator()
    assert animator.advance(30) == 0
    assert animator.advance(30) == 1
    assert animator.advance_to(175) == 2
    assert animator.ticks == 3
    assert animator.offsets()["e"] == pytest.approx(6.0)


def test_same_timestamp_is_noop():
    animator = _animator()
    animator.advance_to(100)
    assert animator.advance_to(100) == 0
    assert animator.ticks == 2


def test_offset_wraps_around_path():
    animator = _animator(speed=30.0)
    animator.advance(250)
    assert animator.offsets()["e"] == pytest.approx(50.0)
    x, y = animator.positions()["e"]
    assert x == pytest.approx(50.0, abs=1e-6)
    assert y == pytest.approx(0.0)


def test_time_must_not_go_backwards():
    animator = _animator()
    animator.advance_to(100)
    with pytest.raises(ValueError):
        animator.advance_to(99)
    with pytest.raises(ValueError):
        animator.advance(-1)


def test_hooks_receive_tick_count():
    calls = []
    animator = _animator(tick_hooks=[lambda a, ticks: calls.append(ticks)])
    animator.advance(10)
    animator.advance(140)
    assert calls == [3]


def test_cancel_is_final():
    calls = []
    animator = _animator()
    animator.register_hook(lambda a, ticks: calls.append(ticks))
    animator.advance(100)
    animator.cancel()
    animator.cancel()
    animator.register_hook(lambda a, ticks: calls.append(-1))
    assert not animator.active
    assert animator.advance(1000) == 0
    assert animator.offsets()["e"] == pytest.approx(4.0)
    assert calls == [2]


def test_invalid_construction():
    with pytest.raises(ValueError):
        _animator(tick_ms=0)
    stray = FlowElement(id="x", path_id="missing", offset=0, speed=1, radius=1, x=0, y=0)
    with pytest.raises(ValueError):
        FlowAnimator((PATH,), (stray,))


def test_from_frame(make_frame, midpoint):
    frame = make_frame(midpoint)
    animator = FlowAnimator.from_frame(frame)
    assert len(animator) == len(frame.flow_elements) == 20
    before = animator.positions()
    animator.advance(500)
    assert animator.positions() != before
