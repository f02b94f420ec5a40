"""Typed sensor readings consumed by the heading source arbiter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import isfinite, sqrt
from typing import ClassVar, Optional, Tuple, Union


class SourceKind(str, Enum):
    FUSED_QUATERNION = "sensor-api"
    ABSOLUTE_EVENT = "absolute-event"
    COMPASS_HEADING = "webkit-compass"
    ABSOLUTE_FLAG = "absolute-flag"
    FALLBACK_ROTATION = "fallback-rotation"


# Highest reliability first.
SOURCE_PRIORITY: Tuple[SourceKind, ...] = (
    SourceKind.FUSED_QUATERNION,
    SourceKind.ABSOLUTE_EVENT,
    SourceKind.COMPASS_HEADING,
    SourceKind.ABSOLUTE_FLAG,
    SourceKind.FALLBACK_ROTATION,
)


def priority_rank(kind: SourceKind) -> int:
    """Lower rank means more reliable."""

    return SOURCE_PRIORITY.index(kind)


def _present(*values: Optional[float]) -> bool:
    for value in values:
        if value is None:
            return False
        try:
            if not isfinite(float(value)):
                return False
        except (TypeError, ValueError):
            return False
    return True


@dataclass(frozen=True)
class FusedQuaternionReading:
    """Absolute orientation quaternion ``(x, y, z, w)``."""

    kind: ClassVar[SourceKind] = SourceKind.FUSED_QUATERNION
    quaternion: Optional[Tuple[float, float, float, float]]

    def is_valid(self) -> bool:
        return (
            self.quaternion is not None
            and len(self.quaternion) == 4
            and _present(*self.quaternion)
        )


@dataclass(frozen=True)
class AbsoluteEventReading:
    """Euler angles from an event the platform guarantees to be absolute.

    Some browsers still fire it with relative values and ``absolute=False``;
    such readings are invalid. ``None`` means the flag was not reported.
    """

    kind: ClassVar[SourceKind] = SourceKind.ABSOLUTE_EVENT
    alpha: Optional[float]
    beta: Optional[float]
    gamma: Optional[float]
    absolute: Optional[bool] = None

    def is_valid(self) -> bool:
        if self.absolute is False:
            return False
        return _present(self.alpha, self.beta, self.gamma)


@dataclass(frozen=True)
class CompassHeadingReading:
    """Platform-native, tilt-compensated compass heading field."""

    kind: ClassVar[SourceKind] = SourceKind.COMPASS_HEADING
    compass_heading: Optional[float]
    beta: Optional[float] = None

    def is_valid(self) -> bool:
        return _present(self.compass_heading)


@dataclass(frozen=True)
class AbsoluteFlagReading:
    """Generic orientation event that flags itself as absolute."""

    kind: ClassVar[SourceKind] = SourceKind.ABSOLUTE_FLAG
    alpha: Optional[float]
    beta: Optional[float]
    gamma: Optional[float]
    absolute: Optional[bool]

    def is_valid(self) -> bool:
        return self.absolute is True and _present(self.alpha, self.beta, self.gamma)


@dataclass(frozen=True)
class FallbackRotationReading:
    """Uncorrected orientation event, usable only as a last resort."""

    kind: ClassVar[SourceKind] = SourceKind.FALLBACK_ROTATION
    alpha: Optional[float]
    beta: Optional[float]
    gamma: Optional[float]

    def is_valid(self) -> bool:
        return _present(self.alpha, self.beta, self.gamma)


SensorReading = Union[
    FusedQuaternionReading,
    AbsoluteEventReading,
    CompassHeadingReading,
    AbsoluteFlagReading,
    FallbackRotationReading,
]


@dataclass(frozen=True)
class MagneticFieldReading:
    """Raw magnetometer vector in micro-tesla."""

    x: float
    y: float
    z: float

    @property
    def magnitude(self) -> float:
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class HeadingSample:
    """A normalised heading emitted by the arbiter for one accepted reading."""

    raw_heading: float
    tilt: float
    source: SourceKind
    timestamp: float


__all__ = [
    "AbsoluteEventReading",
    "AbsoluteFlagReading",
    "CompassHeadingReading",
    "FallbackRotationReading",
    "FusedQuaternionReading",
    "HeadingSample",
    "MagneticFieldReading",
    "SOURCE_PRIORITY",
    "SensorReading",
    "SourceKind",
    "priority_rank",
]
