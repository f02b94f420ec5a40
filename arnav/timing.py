"""Deterministic timing helpers driven by explicit ``dt`` or an injected clock."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple

Clock = Callable[[], float]

monotonic: Clock = time.monotonic


@dataclass
class HoldTimer:
    """Accumulates time spent aligned toward the hold-to-complete goal.

    Progress is capped at ``required``; any update with a false condition
    (alignment lost) drops it back to zero.
    """

    required: float
    progress: float = 0.0

    def update(self, condition: bool, dt: float) -> float:
        if dt < 0:
            raise ValueError("dt must be non-negative")
        if condition:
            self.progress = min(self.required, self.progress + dt)
        else:
            self.progress = 0.0
        return self.progress

    def reset(self) -> None:
        self.progress = 0.0

    @property
    def ratio(self) -> float:
        if self.required <= 0:
            return 1.0
        return max(0.0, min(1.0, self.progress / self.required))

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.required


@dataclass
class Throttle:
    """Lets an action through at most once per ``interval`` seconds."""

    interval: float
    clock: Clock = monotonic
    _last: Optional[float] = field(default=None, repr=False)

    def ready(self) -> bool:
        now = self.clock()
        if self._last is not None and now - self._last < self.interval:
            return False
        self._last = now
        return True

    @property
    def last_fired(self) -> Optional[float]:
        return self._last

    def reset(self) -> None:
        self._last = None


class EscalationTimer:
    """Fires consecutive stages once their cumulative delay has elapsed.

    ``poll()`` returns the indexes of stages that became due since the last
    call; each stage fires at most once per ``arm()``.
    """

    def __init__(self, delays: Sequence[float], clock: Clock = monotonic) -> None:
        if any(delay < 0 for delay in delays):
            raise ValueError("delays must be non-negative")
        self._deadlines: Tuple[float, ...] = tuple(
            sum(delays[: index + 1]) for index in range(len(delays))
        )
        self._clock = clock
        self._armed_at: Optional[float] = None
        self._fired = 0

    @property
    def armed(self) -> bool:
        return self._armed_at is not None

    @property
    def stages_fired(self) -> int:
        return self._fired

    def arm(self) -> None:
        self._armed_at = self._clock()
        self._fired = 0

    def disarm(self) -> None:
        self._armed_at = None
        self._fired = 0

    def poll(self) -> Tuple[int, ...]:
        if self._armed_at is None:
            return ()
        elapsed = self._clock() - self._armed_at
        due = []
        while self._fired < len(self._deadlines) and elapsed >= self._deadlines[self._fired]:
            due.append(self._fired)
            self._fired += 1
        return tuple(due)

    def remaining(self) -> Optional[float]:
        """Seconds until the next stage fires, ``None`` when nothing is pending."""

        if self._armed_at is None or self._fired >= len(self._deadlines):
            return None
        elapsed = self._clock() - self._armed_at
        return max(0.0, self._deadlines[self._fired] - elapsed)


__all__ = ["Clock", "EscalationTimer", "HoldTimer", "Throttle", "monotonic"]
