"""Heading stabilisation with gimbal-lock aware jump rejection."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Tuple

from . import constants, metrics
from .angles import angular_difference, circular_mean

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneParameters:
    max_jump: float
    window_size: int
    reject_threshold: int


NORMAL_ZONE = ZoneParameters(
    max_jump=constants.MAX_JUMP_NORMAL_DEGREES,
    window_size=constants.SMOOTHING_WINDOW_NORMAL,
    reject_threshold=constants.REJECT_THRESHOLD_NORMAL,
)
GIMBAL_ZONE = ZoneParameters(
    max_jump=constants.MAX_JUMP_GIMBAL_DEGREES,
    window_size=constants.SMOOTHING_WINDOW_GIMBAL,
    reject_threshold=constants.REJECT_THRESHOLD_GIMBAL,
)


@dataclass(frozen=True)
class StabilizerState:
    last_raw_heading: Optional[float]
    heading_buffer: Tuple[float, ...]
    consecutive_reject_count: int
    stabilized_heading: float


def in_gimbal_zone(tilt: Optional[float]) -> bool:
    """Euler headings become unstable when the device stands near vertical."""

    return abs((tilt or 0.0) - 90.0) < constants.GIMBAL_LOCK_ZONE_DEGREES


class HeadingStabilizer:
    """Turns a spiky raw heading stream into a stable one.

    Large single-step jumps are treated as noise until the same kind of jump
    repeats ``reject_threshold`` times in a row, at which point the new
    direction is accepted and the smoothing window restarts from it. The
    accepted samples are averaged with a circular mean over a window whose
    size depends on whether the device is in the gimbal-lock zone.
    """

    def __init__(
        self,
        *,
        normal: ZoneParameters = NORMAL_ZONE,
        gimbal: ZoneParameters = GIMBAL_ZONE,
        on_rejected_jump: Optional[Callable[[], None]] = None,
    ) -> None:
        for params in (normal, gimbal):
            if params.window_size <= 0:
                raise ValueError("window_size must be positive")
            if params.reject_threshold <= 0:
                raise ValueError("reject_threshold must be positive")
        self._normal = normal
        self._gimbal = gimbal
        self._on_rejected_jump = on_rejected_jump
        self._buffer: Deque[float] = deque()
        self._last_raw: Optional[float] = None
        self._reject_count = 0
        self._heading: Optional[float] = None

    @property
    def heading(self) -> Optional[float]:
        """Latest stabilised heading, ``None`` before the first sample."""

        return self._heading

    @property
    def state(self) -> StabilizerState:
        return StabilizerState(
            last_raw_heading=self._last_raw,
            heading_buffer=tuple(self._buffer),
            consecutive_reject_count=self._reject_count,
            stabilized_heading=self._heading if self._heading is not None else 0.0,
        )

    def update(self, raw_heading: float, tilt: Optional[float]) -> float:
        gimbal = in_gimbal_zone(tilt)
        params = self._gimbal if gimbal else self._normal

        if self._last_raw is not None:
            jump = angular_difference(raw_heading, self._last_raw)
            if jump > params.max_jump:
                self._reject_count += 1
                metrics.observe_rejected_jump(gimbal)
                if self._on_rejected_jump is not None:
                    self._on_rejected_jump()
                if self._reject_count < params.reject_threshold:
                    _logger.debug(
                        "rejected %.1f deg jump (%d/%d, gimbal=%s)",
                        jump,
                        self._reject_count,
                        params.reject_threshold,
                        gimbal,
                    )
                    return self._heading if self._heading is not None else raw_heading
                _logger.debug("accepting sustained jump to %.1f deg", raw_heading)
                self._buffer.clear()
            else:
                self._reject_count = 0

        self._last_raw = raw_heading
        self._buffer.append(raw_heading)
        while len(self._buffer) > params.window_size:
            self._buffer.popleft()

        self._heading = circular_mean(self._buffer)
        return self._heading

    def reset(self) -> None:
        self._buffer.clear()
        self._last_raw = None
        self._reject_count = 0
        self._heading = None


__all__ = [
    "GIMBAL_ZONE",
    "HeadingStabilizer",
    "NORMAL_ZONE",
    "StabilizerState",
    "ZoneParameters",
    "in_gimbal_zone",
]
