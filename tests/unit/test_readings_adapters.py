from __future__ import annotations

import math

import pytest

from arnav.adapters import (
    magnetic_field_from_payload,
    reading_from_orientation_event,
    reading_from_quaternion,
)
from arnav.readings import (
    SOURCE_PRIORITY,
    AbsoluteEventReading,
    AbsoluteFlagReading,
    CompassHeadingReading,
    FallbackRotationReading,
    FusedQuaternionReading,
    SourceKind,
    priority_rank,
)


def test_priority_order_is_most_reliable_first() -> None:
    assert SOURCE_PRIORITY[0] is SourceKind.FUSED_QUATERNION
    assert SOURCE_PRIORITY[-1] is SourceKind.FALLBACK_ROTATION
    assert priority_rank(SourceKind.ABSOLUTE_EVENT) < priority_rank(SourceKind.COMPASS_HEADING)
    assert priority_rank(SourceKind.COMPASS_HEADING) < priority_rank(SourceKind.ABSOLUTE_FLAG)


class TestReadingValidity:
    def test_absolute_event_rejects_explicit_relative_flag(self) -> None:
        assert AbsoluteEventReading(10.0, 20.0, 0.0, absolute=False).is_valid() is False
        assert AbsoluteEventReading(10.0, 20.0, 0.0, absolute=None).is_valid() is True
        assert AbsoluteEventReading(10.0, 20.0, 0.0, absolute=True).is_valid() is True

    def test_missing_angle_is_invalid(self) -> None:
        assert AbsoluteEventReading(None, 20.0, 0.0).is_valid() is False
        assert FallbackRotationReading(10.0, math.nan, 0.0).is_valid() is False

    def test_absolute_flag_requires_true(self) -> None:
        assert AbsoluteFlagReading(1.0, 2.0, 3.0, absolute=None).is_valid() is False
        assert AbsoluteFlagReading(1.0, 2.0, 3.0, absolute=True).is_valid() is True

    def test_quaternion_needs_four_finite_components(self) -> None:
        assert FusedQuaternionReading(None).is_valid() is False
        assert FusedQuaternionReading((0.0, 0.0, 0.0, math.inf)).is_valid() is False
        assert FusedQuaternionReading((0.0, 0.0, 0.0, 1.0)).is_valid() is True

    def test_compass_heading_only_needs_heading(self) -> None:
        assert CompassHeadingReading(compass_heading=45.0).is_valid() is True
        assert CompassHeadingReading(compass_heading=None, beta=80.0).is_valid() is False


class TestOrientationEventAdapter:
    def test_compass_field_wins_on_plain_events(self) -> None:
        reading = reading_from_orientation_event(
            "deviceorientation",
            {"webkitCompassHeading": 45, "alpha": 10, "beta": 80, "gamma": 0, "absolute": True},
        )
        assert reading == CompassHeadingReading(compass_heading=45.0, beta=80.0)

    def test_absolute_flag_event(self) -> None:
        reading = reading_from_orientation_event(
            "deviceorientation", {"alpha": 10, "beta": 20, "gamma": 5, "absolute": True}
        )
        assert isinstance(reading, AbsoluteFlagReading)
        assert reading.is_valid()

    def test_relative_event_becomes_fallback(self) -> None:
        reading = reading_from_orientation_event(
            "deviceorientation", {"alpha": 10, "beta": 20, "gamma": 5, "absolute": False}
        )
        assert isinstance(reading, FallbackRotationReading)

    def test_absolute_event_keeps_reported_flag(self) -> None:
        reading = reading_from_orientation_event(
            "deviceorientationabsolute",
            {"alpha": "10.5", "beta": 20, "gamma": 5, "absolute": "false"},
        )
        assert isinstance(reading, AbsoluteEventReading)
        assert reading.alpha == pytest.approx(10.5)
        assert reading.is_valid() is False

    def test_unparseable_angles_yield_invalid_reading(self) -> None:
        reading = reading_from_orientation_event(
            "deviceorientationabsolute", {"alpha": "north", "beta": True, "gamma": 0}
        )
        assert reading is not None
        assert reading.is_valid() is False

    def test_unknown_event_type_is_ignored(self) -> None:
        assert reading_from_orientation_event("devicemotion", {"alpha": 1}) is None


def test_quaternion_adapter() -> None:
    assert reading_from_quaternion([0, 0, 0, 1]).quaternion == (0.0, 0.0, 0.0, 1.0)
    assert reading_from_quaternion([0, 0, "x", 1]).quaternion is None
    assert reading_from_quaternion([0, 0, 1]).quaternion is None
    assert reading_from_quaternion(None).is_valid() is False


def test_magnetic_field_payload() -> None:
    field = magnetic_field_from_payload({"x": 3, "y": 4, "z": 0})
    assert field is not None
    assert field.magnitude == pytest.approx(5.0)
    assert magnetic_field_from_payload({"x": 3, "y": 4}) is None


@pytest.mark.parametrize("payload", [None, 5, "alpha", [1.0, 2.0, 3.0]])
def test_non_mapping_payloads_yield_nothing(payload) -> None:
    assert reading_from_orientation_event("deviceorientation", payload) is None
    assert reading_from_orientation_event("deviceorientationabsolute", payload) is None
    assert magnetic_field_from_payload(payload) is None


@pytest.mark.parametrize("quaternion", [5, "wxyz", {"x": 0.0}, [None, None]])
def test_non_sequence_quaternion_is_invalid(quaternion) -> None:
    assert reading_from_quaternion(quaternion).is_valid() is False
