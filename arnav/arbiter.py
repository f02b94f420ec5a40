"""Selection and normalisation of heading sources.

Several orientation streams may fire at once with different reliability.
The arbiter keeps the most reliable one that has actually produced data:
once a source is active, anything ranked below it is ignored for the rest of
the session so the heading never flaps between reference frames.
"""

from __future__ import annotations

import logging
from math import isfinite
from typing import Dict, Optional, Tuple

from . import constants, metrics
from .angles import normalize
from .events import EventBus, SensorError, SensorWarning, SourceActivated
from .orientation import heading_and_tilt_from_quaternion, heading_from_euler
from .readings import (
    AbsoluteEventReading,
    AbsoluteFlagReading,
    CompassHeadingReading,
    FallbackRotationReading,
    FusedQuaternionReading,
    HeadingSample,
    SensorReading,
    SourceKind,
    priority_rank,
)
from .timing import Clock, EscalationTimer, monotonic

_logger = logging.getLogger(__name__)

NO_DATA_WARNING = "No absolute compass data received; using uncorrected rotation fallback"
NO_DATA_ERROR = "No compass data available; check the device sensors"

ABSOLUTE_SOURCES = frozenset({SourceKind.FUSED_QUATERNION, SourceKind.ABSOLUTE_EVENT})


def heading_and_tilt(reading: SensorReading) -> Tuple[float, float]:
    """Normalise a valid reading into ``(heading, tilt)`` degrees."""

    if isinstance(reading, FusedQuaternionReading):
        return heading_and_tilt_from_quaternion(reading.quaternion or ())
    if isinstance(reading, CompassHeadingReading):
        beta = reading.beta
        # A missing or zero beta is reported as upright.
        if not beta or not isfinite(beta):
            beta = constants.DEFAULT_COMPASS_TILT_DEGREES
        return normalize(float(reading.compass_heading or 0.0)), float(beta)
    if isinstance(
        reading, (AbsoluteEventReading, AbsoluteFlagReading, FallbackRotationReading)
    ):
        alpha = float(reading.alpha)  # type: ignore[arg-type]
        beta = float(reading.beta)  # type: ignore[arg-type]
        gamma = float(reading.gamma)  # type: ignore[arg-type]
        return heading_from_euler(alpha, beta, gamma), beta
    raise TypeError(f"Unsupported reading type: {type(reading).__name__}")


class HeadingSourceArbiter:
    def __init__(
        self,
        *,
        bus: Optional[EventBus] = None,
        clock: Clock = monotonic,
        fallback_timeout: float = constants.FALLBACK_TIMEOUT_SECONDS,
        fatal_timeout: float = constants.FATAL_TIMEOUT_SECONDS,
    ) -> None:
        if fallback_timeout <= 0:
            raise ValueError("fallback_timeout must be positive")
        if fatal_timeout <= 0:
            raise ValueError("fatal_timeout must be positive")
        self._bus = bus
        self._clock = clock
        self._timer = EscalationTimer((fallback_timeout, fatal_timeout), clock=clock)
        self._active: Optional[SourceKind] = None
        self._fallback_enabled = False
        self._failed = False
        self._unavailable: Dict[SourceKind, str] = {}

    @property
    def active_source(self) -> Optional[SourceKind]:
        return self._active

    @property
    def has_absolute_source(self) -> bool:
        return self._active in ABSOLUTE_SOURCES

    @property
    def fallback_enabled(self) -> bool:
        return self._fallback_enabled

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def unavailable_sources(self) -> Dict[SourceKind, str]:
        return dict(self._unavailable)

    def start(self) -> None:
        """Begin a stream; the no-data timeouts count from here."""

        if self._active is None:
            self._timer.arm()

    def seconds_until_timeout(self) -> Optional[float]:
        return self._timer.remaining()

    def mark_unavailable(self, kind: SourceKind, reason: str = "unsupported") -> None:
        """Record that a whole source API is absent or has failed."""

        self._unavailable[kind] = reason
        _logger.info("heading source %s unavailable: %s", kind.value, reason)

    def register_sample(self, reading: SensorReading) -> Optional[HeadingSample]:
        kind = reading.kind
        if kind in self._unavailable:
            metrics.observe_sample(kind.value, False, "unavailable")
            return None
        if self._active is not None and priority_rank(self._active) < priority_rank(kind):
            metrics.observe_sample(kind.value, False, "outranked")
            return None
        if kind is SourceKind.FALLBACK_ROTATION and not self._fallback_enabled:
            metrics.observe_sample(kind.value, False, "fallback_disabled")
            return None
        if not reading.is_valid():
            _logger.debug("dropping invalid %s reading", kind.value)
            metrics.observe_sample(kind.value, False, "invalid")
            return None

        heading, tilt = heading_and_tilt(reading)

        if self._active is None or priority_rank(kind) < priority_rank(self._active):
            self._activate(kind)

        metrics.observe_sample(kind.value, True)
        return HeadingSample(
            raw_heading=heading, tilt=tilt, source=kind, timestamp=self._clock()
        )

    def check_timeouts(self) -> None:
        """Escalate when no source has delivered data in time."""

        for stage in self._timer.poll():
            if self._active is not None:
                continue
            if stage == 0:
                self._fallback_enabled = True
                _logger.warning(NO_DATA_WARNING)
                metrics.observe_sensor_problem(fatal=False)
                self._publish(SensorWarning(reason=NO_DATA_WARNING))
            else:
                self._failed = True
                _logger.error(NO_DATA_ERROR)
                metrics.observe_sensor_problem(fatal=True)
                self._publish(SensorError(reason=NO_DATA_ERROR, fatal=True))

    def reset(self) -> None:
        self._timer.disarm()
        self._active = None
        self._fallback_enabled = False
        self._failed = False
        self._unavailable.clear()

    def _activate(self, kind: SourceKind) -> None:
        previous = self._active
        self._active = kind
        self._timer.disarm()
        if kind is SourceKind.FALLBACK_ROTATION:
            _logger.warning(
                "using uncorrected rotation fallback; heading accuracy is not guaranteed"
            )
        else:
            _logger.info(
                "heading source %s active (was %s)",
                kind.value,
                previous.value if previous else "none",
            )
        self._publish(SourceActivated(source=kind))

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)


__all__ = [
    "ABSOLUTE_SOURCES",
    "HeadingSourceArbiter",
    "NO_DATA_ERROR",
    "NO_DATA_WARNING",
    "heading_and_tilt",
]
