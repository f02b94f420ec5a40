"""Navigation session: one arbiter, stabilizer and assessor per instance.

The session is the only object a host talks to. It owns the per-session
state explicitly (no module globals) and reports every outcome through its
:class:`~arnav.events.EventBus`; none of the public entry points raise.

Lifecycle:

* ``await start()`` resolves the optional permission future, subscribes the
  host sensor bindings the first time and opens the calibration gate.
* ``pause()`` stops navigation but keeps the sensors subscribed, so the
  heading keeps tracking in the background and the reference frame stays
  warm for the next ``start()``.
* ``stop()`` unsubscribes every sensor and clears heading state; calibration
  statistics start over on the next ``start()``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from .adapters import (
    magnetic_field_from_payload,
    reading_from_orientation_event,
    reading_from_quaternion,
)
from .alignment import AlignmentTracker
from .arbiter import HeadingSourceArbiter
from .calibration import CalibrationQualityAssessor, CalibrationReport, QualityLevel
from .calibration_gate import CalibrationGate, GateState
from .config import NavigationSettings, get_settings
from .constants import FALLBACK_TIMEOUT_SECONDS, FATAL_TIMEOUT_SECONDS
from .direction import TurnDirection
from .events import EventBus, HeadingUpdated, SensorError
from .metrics import observe_sensor_problem
from .readings import HeadingSample, SensorReading, SourceKind
from .stabilizer import HeadingStabilizer
from .timing import Clock, monotonic

_logger = logging.getLogger(__name__)

PERMISSION_DENIED = "Device orientation permission denied"

Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class SensorBinding:
    """Host hook that subscribes one platform sensor to the session.

    ``subscribe`` receives the session, wires the platform listener to one of
    its ``handle_*`` methods and returns a callable that unsubscribes the
    listener and stops any hardware sensor object. Raising from
    ``subscribe`` marks ``kind`` unavailable.
    """

    name: str
    subscribe: Callable[["NavigationSession"], Optional[Unsubscribe]]
    kind: Optional[SourceKind] = None


class SessionSnapshot(BaseModel):
    running: bool
    sensors_active: bool
    failed: bool
    heading: Optional[float] = None
    tilt: Optional[float] = None
    source: Optional[SourceKind] = None
    target_bearing: float
    tolerance: float
    is_aligned: bool
    turn_direction: Optional[TurnDirection] = None
    progress_ratio: float
    completed: bool
    calibration_quality: QualityLevel
    gate_state: GateState


class NavigationSession:
    def __init__(
        self,
        settings: Optional[NavigationSettings] = None,
        *,
        sensors: Sequence[SensorBinding] = (),
        bus: Optional[EventBus] = None,
        clock: Clock = monotonic,
        fallback_timeout: float = FALLBACK_TIMEOUT_SECONDS,
        fatal_timeout: float = FATAL_TIMEOUT_SECONDS,
        watchdog: bool = True,
    ) -> None:
        self.settings = settings or get_settings()
        self.bus = bus or EventBus()
        self._clock = clock
        self._sensors = tuple(sensors)
        self._use_watchdog = watchdog

        self.arbiter = HeadingSourceArbiter(
            bus=self.bus,
            clock=clock,
            fallback_timeout=fallback_timeout,
            fatal_timeout=fatal_timeout,
        )
        self.assessor = CalibrationQualityAssessor(
            bus=self.bus, enabled=self.settings.calibration_check, clock=clock
        )
        self.stabilizer = HeadingStabilizer(
            on_rejected_jump=self.assessor.record_rejected_jump
        )
        self.gate = CalibrationGate(enabled=self.settings.calibration_gate)
        self.alignment = AlignmentTracker(
            target=self.settings.target_bearing,
            tolerance=self.settings.tolerance,
            progress_duration=self.settings.progress_duration,
            bus=self.bus,
        )

        self._running = False
        self._sensors_active = False
        self._permission_failed = False
        self._unsubscribers: List[Unsubscribe] = []
        self._watchdog_task: Optional[asyncio.Task] = None
        self._tilt: Optional[float] = None
        self._last_sample_time: Optional[float] = None

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running

    @property
    def sensors_active(self) -> bool:
        return self._sensors_active

    @property
    def failed(self) -> bool:
        return self._permission_failed or self.arbiter.failed

    @property
    def heading(self) -> Optional[float]:
        return self.stabilizer.heading

    @property
    def tilt(self) -> Optional[float]:
        return self._tilt

    @property
    def active_source(self) -> Optional[SourceKind]:
        return self.arbiter.active_source

    @property
    def calibration_quality(self) -> QualityLevel:
        return self.assessor.quality

    @property
    def target_bearing(self) -> float:
        return self.alignment.target

    def set_target_bearing(self, bearing: float) -> None:
        self.alignment.set_target(bearing)

    def set_tolerance(self, tolerance: float) -> None:
        if tolerance < 0:
            _logger.warning("ignoring negative tolerance %s", tolerance)
            return
        self.alignment.tolerance = tolerance

    def calibration_report(self) -> CalibrationReport:
        return self.assessor.report(has_absolute_source=self.arbiter.has_absolute_source)

    def snapshot(self) -> SessionSnapshot:
        alignment = self.alignment.snapshot()
        heading = self.heading
        return SessionSnapshot(
            running=self._running,
            sensors_active=self._sensors_active,
            failed=self.failed,
            heading=heading,
            tilt=self._tilt,
            source=self.active_source,
            target_bearing=self.alignment.target,
            tolerance=self.alignment.tolerance,
            is_aligned=alignment.decision.is_aligned if heading is not None else False,
            turn_direction=alignment.decision.turn_direction if heading is not None else None,
            progress_ratio=alignment.progress_ratio,
            completed=alignment.completed,
            calibration_quality=self.assessor.quality,
            gate_state=self.gate.state,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self, permission: Optional[Awaitable[bool]] = None) -> bool:
        """Start (or resume) navigation; returns ``False`` on a fatal error."""

        if self._running:
            return True

        if not self._sensors_active and permission is not None:
            try:
                granted = await permission
            except Exception as exc:
                self._permission_error(f"Permission error: {exc}")
                return False
            if not granted:
                self._permission_error(PERMISSION_DENIED)
                return False
            self._permission_failed = False

        self._running = True
        self._last_sample_time = None
        self.alignment.reset()
        self.gate.open_session(self.settings.calibration_check)

        if self._sensors_active:
            # Warm sensors: judge the data already collected right away.
            if (
                self.gate.state == GateState.WAITING
                and self.assessor.sample_count >= self.assessor.warmup_samples
            ):
                self.gate.on_quality(self.assessor.evaluate())
        else:
            self._start_sensors()
        _logger.info("navigation started (target=%.1f)", self.alignment.target)
        return True

    def pause(self) -> None:
        if not self._running:
            return
        self._running = False
        self.alignment.reset()
        _logger.info("navigation paused; sensors stay subscribed")

    def stop(self) -> None:
        self.pause()
        if self._watchdog_task is not None:
            self._watchdog_task.cancel()
            self._watchdog_task = None
        for unsubscribe in self._unsubscribers:
            try:
                unsubscribe()
            except Exception:
                _logger.exception("failed to unsubscribe sensor listener")
        self._unsubscribers.clear()
        self._sensors_active = False
        self.arbiter.reset()
        self.stabilizer.reset()
        self.gate.reset()
        self._permission_failed = False
        self._tilt = None
        self._last_sample_time = None
        _logger.info("sensors stopped")

    def poll_timeouts(self) -> None:
        """Run the arbiter's no-data escalation check."""

        self.arbiter.check_timeouts()

    # ------------------------------------------------------------------
    # Sensor ingress
    # ------------------------------------------------------------------
    def handle_reading(self, reading: SensorReading) -> None:
        try:
            sample = self.arbiter.register_sample(reading)
            if sample is not None:
                self._handle_sample(sample)
        except Exception:
            _logger.exception("failed to process %s", type(reading).__name__)

    def handle_orientation_event(self, event_type: str, payload: Mapping[str, Any]) -> None:
        try:
            reading = reading_from_orientation_event(event_type, payload)
        except Exception:
            _logger.exception("failed to parse %s payload", event_type)
            return
        if reading is None:
            _logger.debug("ignoring orientation event %s", event_type)
            return
        self.handle_reading(reading)

    def handle_quaternion(self, quaternion: Optional[Sequence[Any]]) -> None:
        try:
            reading = reading_from_quaternion(quaternion)
        except Exception:
            _logger.exception("failed to parse quaternion payload")
            return
        self.handle_reading(reading)

    def handle_magnetometer(self, payload: Mapping[str, Any]) -> None:
        try:
            field = magnetic_field_from_payload(payload)
            if field is None:
                _logger.debug("ignoring magnetometer payload without x/y/z")
                return
            self.assessor.set_magnetic_field_magnitude(field.magnitude)
        except Exception:
            _logger.exception("failed to process magnetometer payload")

    def report_source_unavailable(self, kind: SourceKind, reason: str) -> None:
        self.arbiter.mark_unavailable(kind, reason)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _start_sensors(self) -> None:
        self.assessor.reset()
        self.arbiter.start()
        self._sensors_active = True
        for binding in self._sensors:
            try:
                unsubscribe = binding.subscribe(self)
            except Exception as exc:
                _logger.warning("sensor %s unavailable: %s", binding.name, exc)
                if binding.kind is not None:
                    self.arbiter.mark_unavailable(binding.kind, str(exc))
                continue
            if unsubscribe is not None:
                self._unsubscribers.append(unsubscribe)
        if self._use_watchdog:
            self._watchdog_task = asyncio.get_running_loop().create_task(
                self._watch_timeouts()
            )

    async def _watch_timeouts(self) -> None:
        while True:
            remaining = self.arbiter.seconds_until_timeout()
            if remaining is None:
                return
            await asyncio.sleep(max(remaining, 0.01))
            self.poll_timeouts()

    def _handle_sample(self, sample: HeadingSample) -> None:
        verdict = self.assessor.record_sample(sample.raw_heading)
        if verdict is not None:
            self.gate.on_quality(verdict)

        # Heading keeps tracking while paused so a resume starts warm.
        heading = self.stabilizer.update(sample.raw_heading, sample.tilt)
        self._tilt = sample.tilt

        if not self._running or self.alignment.completed:
            return

        dt = 0.0
        if self._last_sample_time is not None:
            dt = max(0.0, sample.timestamp - self._last_sample_time)
        self._last_sample_time = sample.timestamp

        self.bus.publish(
            HeadingUpdated(
                heading=heading,
                tilt=sample.tilt,
                source=sample.source,
                target=self.alignment.target,
            )
        )
        if self.gate.holds_navigation:
            return
        self.alignment.update(heading, dt)

    def _permission_error(self, reason: str) -> None:
        self._permission_failed = True
        _logger.error(reason)
        observe_sensor_problem(fatal=True)
        self.bus.publish(SensorError(reason=reason, fatal=True))


__all__ = ["NavigationSession", "SensorBinding", "SessionSnapshot", "PERMISSION_DENIED"]
