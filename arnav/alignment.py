"""Alignment tracking: edge events plus the hold-to-complete progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .angles import normalize
from .constants import DEFAULT_PROGRESS_SECONDS, DEFAULT_TOLERANCE_DEGREES
from .direction import AlignmentDecision, TurnDirection, decide_alignment
from .events import Aligned, AlignmentUpdated, EventBus, Misaligned, NavigationCompleted
from .timing import HoldTimer


@dataclass
class AlignmentSnapshot:
    decision: AlignmentDecision
    progress_ratio: float
    completed: bool


class AlignmentTracker:
    """Follows the heading against a target bearing.

    Aligned/misaligned transitions are published once per edge. Staying
    aligned for ``progress_duration`` seconds completes the navigation; the
    progress restarts whenever alignment is lost.
    """

    def __init__(
        self,
        *,
        target: float = 0.0,
        tolerance: float = DEFAULT_TOLERANCE_DEGREES,
        progress_duration: float = DEFAULT_PROGRESS_SECONDS,
        bus: Optional[EventBus] = None,
    ) -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        if progress_duration <= 0:
            raise ValueError("progress_duration must be positive")
        self.target = normalize(target)
        self.tolerance = tolerance
        self.progress_duration = progress_duration
        self._bus = bus
        self._progress = HoldTimer(required=progress_duration)
        self._aligned = False
        self._completed = False
        self._decision = AlignmentDecision(
            is_aligned=False, turn_direction=TurnDirection.RIGHT
        )

    @property
    def is_aligned(self) -> bool:
        return self._aligned

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def decision(self) -> AlignmentDecision:
        return self._decision

    def set_target(self, target: float) -> None:
        self.target = normalize(target)

    def update(self, heading: float, dt: float = 0.0) -> AlignmentSnapshot:
        if dt < 0:
            raise ValueError("dt must be non-negative")
        if self._completed:
            return self.snapshot()

        decision = decide_alignment(heading, self.target, self.tolerance)
        self._decision = decision
        self._publish(
            AlignmentUpdated(
                is_aligned=decision.is_aligned, turn_direction=decision.turn_direction
            )
        )

        if decision.is_aligned and not self._aligned:
            self._aligned = True
            self._progress.reset()
            self._publish(Aligned(heading=heading, target=self.target))
        elif not decision.is_aligned and self._aligned:
            self._aligned = False
            self._progress.reset()
            self._publish(
                Misaligned(
                    heading=heading,
                    target=self.target,
                    turn_direction=decision.turn_direction,
                )
            )

        if self._aligned:
            self._progress.update(True, dt)
            if self._progress.is_complete:
                self._completed = True
                self._publish(NavigationCompleted(heading=heading, target=self.target))

        return self.snapshot()

    def snapshot(self) -> AlignmentSnapshot:
        return AlignmentSnapshot(
            decision=self._decision,
            progress_ratio=self._progress.ratio,
            completed=self._completed,
        )

    def reset(self) -> AlignmentSnapshot:
        self._progress.reset()
        self._aligned = False
        self._completed = False
        self._decision = AlignmentDecision(
            is_aligned=False, turn_direction=TurnDirection.RIGHT
        )
        return self.snapshot()

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)


__all__ = ["AlignmentSnapshot", "AlignmentTracker"]
