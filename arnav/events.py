"""Outbound event channel consumed by the presentation layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Type, TypeVar

from .direction import TurnDirection
from .readings import SourceKind

if TYPE_CHECKING:
    from .calibration import QualityLevel

_logger = logging.getLogger("arnav.events")


@dataclass(frozen=True)
class HeadingUpdated:
    heading: float
    tilt: float
    source: SourceKind
    target: float


@dataclass(frozen=True)
class AlignmentUpdated:
    is_aligned: bool
    turn_direction: TurnDirection


@dataclass(frozen=True)
class Aligned:
    heading: float
    target: float


@dataclass(frozen=True)
class Misaligned:
    heading: float
    target: float
    turn_direction: TurnDirection


@dataclass(frozen=True)
class NavigationCompleted:
    heading: float
    target: float


@dataclass(frozen=True)
class CalibrationDegraded:
    quality: QualityLevel
    std_dev: float
    jump_rate: float
    magnetic_field: Optional[float]


@dataclass(frozen=True)
class CalibrationImproved:
    quality: QualityLevel


@dataclass(frozen=True)
class SourceActivated:
    source: SourceKind


@dataclass(frozen=True)
class SensorWarning:
    reason: str


@dataclass(frozen=True)
class SensorError:
    reason: str
    fatal: bool = True


Listener = Callable[[object], None]
E = TypeVar("E")


class EventBus:
    """Synchronous publish/subscribe channel.

    Listener failures are logged and never propagate back into the sensor
    pipeline.
    """

    def __init__(self) -> None:
        self._listeners: Dict[Optional[type], List[Listener]] = {}

    def subscribe(
        self, listener: Callable[[E], None], event_type: Optional[Type[E]] = None
    ) -> Callable[[], None]:
        """Register *listener* for *event_type* (all events when ``None``).

        Returns a callable that removes the subscription.
        """

        bucket = self._listeners.setdefault(event_type, [])
        bucket.append(listener)  # type: ignore[arg-type]

        def unsubscribe() -> None:
            current = self._listeners.get(event_type)
            if current and listener in current:
                current.remove(listener)  # type: ignore[arg-type]

        return unsubscribe

    def publish(self, event: object) -> None:
        listeners = list(self._listeners.get(type(event), ()))
        listeners.extend(self._listeners.get(None, ()))
        if not listeners:
            _logger.debug("no listeners for %s", type(event).__name__)
            return
        for listener in listeners:
            self._safe_emit(listener, event)

    def clear(self) -> None:
        self._listeners.clear()

    @staticmethod
    def _safe_emit(listener: Listener, event: object) -> None:
        try:
            listener(event)
        except Exception:
            _logger.exception("listener failed for event %s", type(event).__name__)


class EventRecorder:
    """Collects every published event; handy for diagnostics and tests."""

    def __init__(self, bus: EventBus) -> None:
        self.events: List[object] = []
        self._unsubscribe = bus.subscribe(self.events.append)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        self.events.clear()

    def close(self) -> None:
        self._unsubscribe()


__all__ = [
    "Aligned",
    "AlignmentUpdated",
    "CalibrationDegraded",
    "CalibrationImproved",
    "EventBus",
    "EventRecorder",
    "HeadingUpdated",
    "Misaligned",
    "NavigationCompleted",
    "SensorError",
    "SensorWarning",
    "SourceActivated",
]
