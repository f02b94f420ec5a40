"""Calibration quality assessment for the raw heading stream.

The assessor looks at the raw (pre-smoothing) headings and judges how far
they can be trusted. Three independent signals are combined and the worst
one wins:

1. circular standard deviation of the most recent headings,
2. lifetime ratio of rejected jumps to samples,
3. magnetic field strength, when a magnetometer is available; a field
   outside the earth's normal range marks the compass as unusable.

Evaluation is throttled so that high-rate sensor streams only pay for an
O(window) append per sample.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Deque, Optional

from pydantic import BaseModel

from . import constants, metrics
from .angles import circular_std_dev
from .events import CalibrationDegraded, CalibrationImproved, EventBus
from .timing import Clock, Throttle, monotonic

_logger = logging.getLogger(__name__)


class QualityLevel(str, Enum):
    UNKNOWN = "unknown"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, QualityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, QualityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, QualityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, QualityLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    QualityLevel.UNKNOWN: 0,
    QualityLevel.POOR: 1,
    QualityLevel.FAIR: 2,
    QualityLevel.GOOD: 3,
}


def worse_quality(a: QualityLevel, b: QualityLevel) -> QualityLevel:
    return a if a <= b else b


def quality_from_std_dev(std_dev: float) -> QualityLevel:
    if std_dev > constants.HEADING_STD_POOR_DEGREES:
        return QualityLevel.POOR
    if std_dev > constants.HEADING_STD_FAIR_DEGREES:
        return QualityLevel.FAIR
    return QualityLevel.GOOD


def quality_from_jump_rate(jump_rate: float) -> QualityLevel:
    if jump_rate > constants.JUMP_RATE_POOR:
        return QualityLevel.POOR
    if jump_rate > constants.JUMP_RATE_FAIR:
        return QualityLevel.FAIR
    return QualityLevel.GOOD


def magnetic_field_in_range(magnitude: float) -> bool:
    return constants.MAG_FIELD_MIN_UT <= magnitude <= constants.MAG_FIELD_MAX_UT


class CalibrationReport(BaseModel):
    """Read-only diagnostics snapshot."""

    quality: QualityLevel
    heading_std_dev: float
    jump_rate: float
    magnetic_field: Optional[float] = None
    total_samples: int
    total_jumps: int
    has_magnetometer: bool = False
    has_absolute_source: bool = False


class CalibrationQualityAssessor:
    def __init__(
        self,
        *,
        bus: Optional[EventBus] = None,
        enabled: bool = True,
        window_size: int = constants.CALIBRATION_SAMPLE_WINDOW,
        warmup_samples: int = constants.CALIBRATION_WARMUP_SAMPLES,
        check_interval: float = constants.CALIBRATION_CHECK_INTERVAL_SECONDS,
        clock: Clock = monotonic,
    ) -> None:
        if window_size <= 0:
            raise ValueError("window_size must be positive")
        if warmup_samples < 0:
            raise ValueError("warmup_samples must be non-negative")
        self.enabled = enabled
        self.window_size = window_size
        self.warmup_samples = warmup_samples
        self._bus = bus
        self._throttle = Throttle(interval=check_interval, clock=clock)
        self._samples: Deque[float] = deque(maxlen=window_size)
        self._total_samples = 0
        self._total_jumps = 0
        self._quality = QualityLevel.UNKNOWN
        self._magnetic_field: Optional[float] = None
        self._has_magnetometer = False

    @property
    def quality(self) -> QualityLevel:
        return self._quality

    @property
    def sample_count(self) -> int:
        """Samples currently held in the analysis window."""

        return len(self._samples)

    @property
    def warmed_up(self) -> bool:
        return self._total_samples >= self.warmup_samples

    @property
    def last_evaluation_time(self) -> Optional[float]:
        return self._throttle.last_fired

    @property
    def magnetic_field(self) -> Optional[float]:
        return self._magnetic_field

    def record_sample(self, raw_heading: float) -> Optional[QualityLevel]:
        """Add a raw heading; returns the verdict when an evaluation ran."""

        if not self.enabled:
            return None
        self._samples.append(raw_heading)
        self._total_samples += 1
        if not self.warmed_up:
            return None
        if not self._throttle.ready():
            return None
        return self.evaluate()

    def record_rejected_jump(self) -> None:
        if not self.enabled:
            return
        self._total_jumps += 1

    def record_magnetic_field(self, x: float, y: float, z: float) -> float:
        magnitude = (x * x + y * y + z * z) ** 0.5
        self.set_magnetic_field_magnitude(magnitude)
        return magnitude

    def set_magnetic_field_magnitude(self, magnitude: Optional[float]) -> None:
        self._magnetic_field = magnitude
        self._has_magnetometer = magnitude is not None

    def std_dev(self) -> float:
        return circular_std_dev(self._samples)

    def jump_rate(self) -> float:
        if self._total_samples <= 0:
            return 0.0
        return self._total_jumps / self._total_samples

    def evaluate(self) -> QualityLevel:
        std_dev = self.std_dev()
        jump_rate = self.jump_rate()
        magnetic_field = self._magnetic_field

        quality = worse_quality(
            quality_from_std_dev(std_dev), quality_from_jump_rate(jump_rate)
        )
        if magnetic_field is not None and not magnetic_field_in_range(magnetic_field):
            quality = QualityLevel.POOR

        previous = self._quality
        self._quality = quality
        metrics.observe_calibration(std_dev, previous.value, quality.value)

        if quality is QualityLevel.POOR and previous is not QualityLevel.POOR:
            _logger.warning(
                "calibration degraded: std_dev=%.1f jump_rate=%.3f field=%s",
                std_dev,
                jump_rate,
                magnetic_field,
            )
            self._publish(
                CalibrationDegraded(
                    quality=quality,
                    std_dev=std_dev,
                    jump_rate=jump_rate,
                    magnetic_field=magnetic_field,
                )
            )
        if quality > previous and previous is not QualityLevel.UNKNOWN:
            _logger.info("calibration improved: %s -> %s", previous.value, quality.value)
            self._publish(CalibrationImproved(quality=quality))
        return quality

    def report(self, *, has_absolute_source: bool = False) -> CalibrationReport:
        return CalibrationReport(
            quality=self._quality,
            heading_std_dev=round(self.std_dev(), 2),
            jump_rate=round(self.jump_rate(), 3),
            magnetic_field=self._magnetic_field,
            total_samples=self._total_samples,
            total_jumps=self._total_jumps,
            has_magnetometer=self._has_magnetometer,
            has_absolute_source=has_absolute_source,
        )

    def reset(self) -> None:
        self._samples.clear()
        self._total_samples = 0
        self._total_jumps = 0
        self._quality = QualityLevel.UNKNOWN
        self._magnetic_field = None
        self._has_magnetometer = False
        self._throttle.reset()

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)


__all__ = [
    "CalibrationQualityAssessor",
    "CalibrationReport",
    "QualityLevel",
    "magnetic_field_in_range",
    "quality_from_jump_rate",
    "quality_from_std_dev",
    "worse_quality",
]
