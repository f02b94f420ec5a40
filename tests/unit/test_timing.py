from __future__ import annotations

import pytest

from arnav.timing import EscalationTimer, HoldTimer, Throttle


def test_hold_timer_accumulates_and_resets() -> None:
    timer = HoldTimer(required=1.0)
    timer.update(True, 0.25)
    timer.update(True, 0.25)
    assert timer.ratio == pytest.approx(0.5)
    timer.update(False, 0.25)
    assert timer.ratio == 0.0
    timer.update(True, 5.0)
    assert timer.is_complete
    assert timer.progress == pytest.approx(1.0)


def test_hold_timer_rejects_negative_dt() -> None:
    with pytest.raises(ValueError):
        HoldTimer(required=1.0).update(True, -0.1)


def test_throttle(clock) -> None:
    throttle = Throttle(interval=2.0, clock=clock)
    assert throttle.ready() is True
    assert throttle.ready() is False
    clock.advance(1.5)
    assert throttle.ready() is False
    clock.advance(0.5)
    assert throttle.ready() is True
    assert throttle.last_fired == pytest.approx(102.0)
    throttle.reset()
    assert throttle.ready() is True


class TestEscalationTimer:
    def test_stages_fire_once_in_order(self, clock) -> None:
        timer = EscalationTimer((5.0, 3.0), clock=clock)
        assert timer.poll() == ()
        timer.arm()
        clock.advance(4.0)
        assert timer.poll() == ()
        assert timer.remaining() == pytest.approx(1.0)
        clock.advance(1.0)
        assert timer.poll() == (0,)
        assert timer.poll() == ()
        clock.advance(3.0)
        assert timer.poll() == (1,)
        assert timer.remaining() is None
        assert timer.stages_fired == 2

    def test_late_poll_fires_all_due_stages(self, clock) -> None:
        timer = EscalationTimer((5.0, 3.0), clock=clock)
        timer.arm()
        clock.advance(20.0)
        assert timer.poll() == (0, 1)

    def test_disarm(self, clock) -> None:
        timer = EscalationTimer((1.0,), clock=clock)
        timer.arm()
        timer.disarm()
        clock.advance(5.0)
        assert timer.armed is False
        assert timer.poll() == ()

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError):
            EscalationTimer((-1.0,))
