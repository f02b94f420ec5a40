"""Boundary adapters from raw host payloads to typed sensor readings.

Hosts forward platform events unmodified as mappings, e.g. the fields of a
``deviceorientation`` event. Unparseable values become ``None`` so that the
arbiter rejects the reading instead of the adapter raising.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC, Sequence as SequenceABC
from math import isnan
from typing import Any, Mapping, Optional, Sequence

from .config import coerce_boolish
from .readings import (
    AbsoluteEventReading,
    AbsoluteFlagReading,
    CompassHeadingReading,
    FallbackRotationReading,
    FusedQuaternionReading,
    MagneticFieldReading,
    SensorReading,
)

ABSOLUTE_ORIENTATION_EVENT = "deviceorientationabsolute"
ORIENTATION_EVENT = "deviceorientation"


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if isnan(parsed) else parsed


def _coerce_flag(value: Any) -> Optional[bool]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return None
    return coerce_boolish(value)


def _euler(payload: Mapping[str, Any]):
    return (
        _coerce_float(payload.get("alpha")),
        _coerce_float(payload.get("beta")),
        _coerce_float(payload.get("gamma")),
    )


def reading_from_orientation_event(
    event_type: str, payload: Mapping[str, Any]
) -> Optional[SensorReading]:
    """Classify one orientation event into the matching reading kind.

    ``deviceorientation`` events are dispatched by content: a compass
    heading field wins, then an explicit ``absolute: true`` flag, and
    anything else is only good for the last-resort rotation fallback.
    """

    if not isinstance(payload, MappingABC):
        return None
    if event_type == ABSOLUTE_ORIENTATION_EVENT:
        alpha, beta, gamma = _euler(payload)
        return AbsoluteEventReading(
            alpha=alpha,
            beta=beta,
            gamma=gamma,
            absolute=_coerce_flag(payload.get("absolute")),
        )
    if event_type != ORIENTATION_EVENT:
        return None

    compass_heading = _coerce_float(payload.get("webkitCompassHeading"))
    if compass_heading is not None:
        return CompassHeadingReading(
            compass_heading=compass_heading, beta=_coerce_float(payload.get("beta"))
        )
    alpha, beta, gamma = _euler(payload)
    if _coerce_flag(payload.get("absolute")) is True:
        return AbsoluteFlagReading(alpha=alpha, beta=beta, gamma=gamma, absolute=True)
    return FallbackRotationReading(alpha=alpha, beta=beta, gamma=gamma)


def reading_from_quaternion(quaternion: Optional[Sequence[Any]]) -> FusedQuaternionReading:
    """Wrap an ``(x, y, z, w)`` orientation sensor quaternion."""

    if (
        not isinstance(quaternion, SequenceABC)
        or isinstance(quaternion, str)
        or len(quaternion) != 4
    ):
        return FusedQuaternionReading(quaternion=None)
    components = tuple(_coerce_float(value) for value in quaternion)
    if any(component is None for component in components):
        return FusedQuaternionReading(quaternion=None)
    return FusedQuaternionReading(quaternion=components)  # type: ignore[arg-type]


def magnetic_field_from_payload(
    payload: Mapping[str, Any],
) -> Optional[MagneticFieldReading]:
    if not isinstance(payload, MappingABC):
        return None
    x = _coerce_float(payload.get("x"))
    y = _coerce_float(payload.get("y"))
    z = _coerce_float(payload.get("z"))
    if x is None or y is None or z is None:
        return None
    return MagneticFieldReading(x=x, y=y, z=z)


__all__ = [
    "ABSOLUTE_ORIENTATION_EVENT",
    "ORIENTATION_EVENT",
    "magnetic_field_from_payload",
    "reading_from_orientation_event",
    "reading_from_quaternion",
]
