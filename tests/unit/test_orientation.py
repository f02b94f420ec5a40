from __future__ import annotations

import math

import pytest

from arnav.angles import angular_difference
from arnav.orientation import heading_and_tilt_from_quaternion, heading_from_euler


def test_upright_phone_facing_north() -> None:
    assert angular_difference(heading_from_euler(0.0, 90.0, 0.0), 0.0) < 1e-9


def test_alpha_rotates_heading_counter_clockwise() -> None:
    assert heading_from_euler(90.0, 90.0, 0.0) == pytest.approx(270.0)
    assert heading_from_euler(30.0, 60.0, 0.0) == pytest.approx(330.0)


def test_heading_is_independent_of_pitch_when_not_flat() -> None:
    a = heading_from_euler(45.0, 30.0, 0.0)
    b = heading_from_euler(45.0, 80.0, 0.0)
    assert angular_difference(a, b) < 1e-9


def test_quaternion_upright_facing_north() -> None:
    half = math.sqrt(0.5)
    heading, tilt = heading_and_tilt_from_quaternion((half, 0.0, 0.0, half))
    assert angular_difference(heading, 0.0) < 1e-9
    assert tilt == pytest.approx(90.0)


@pytest.mark.parametrize(
    ("quaternion", "expected"),
    [
        ((0.5, -0.5, -0.5, 0.5), 90.0),
        ((0.5, 0.5, 0.5, 0.5), 270.0),
    ],
)
def test_quaternion_yaw_maps_to_compass_heading(quaternion, expected) -> None:
    heading, tilt = heading_and_tilt_from_quaternion(quaternion)
    assert heading == pytest.approx(expected)
    assert tilt == pytest.approx(90.0)


def test_quaternion_requires_four_components() -> None:
    with pytest.raises(ValueError):
        heading_and_tilt_from_quaternion((0.0, 0.0, 1.0))
