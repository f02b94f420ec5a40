from __future__ import annotations

import pytest

from arnav.angles import (
    angular_difference,
    circular_mean,
    circular_std_dev,
    mean_resultant_length,
    normalize,
)


@pytest.mark.parametrize(
    ("angle", "expected"),
    [(0.0, 0.0), (-90.0, 270.0), (360.0, 0.0), (720.5, 0.5), (-450.0, 270.0)],
)
def test_normalize_maps_into_half_open_range(angle: float, expected: float) -> None:
    assert normalize(angle) == pytest.approx(expected)


def test_normalize_never_returns_360() -> None:
    assert normalize(-1e-15) < 360.0


def test_angular_difference_wraps() -> None:
    assert angular_difference(350.0, 10.0) == pytest.approx(20.0)
    assert angular_difference(10.0, 350.0) == pytest.approx(20.0)
    assert angular_difference(0.0, 180.0) == pytest.approx(180.0)
    assert angular_difference(45.0, 45.0) == pytest.approx(0.0)
    assert angular_difference(0.0, 360.0) == 0.0


def test_circular_mean_handles_wraparound() -> None:
    mean = circular_mean([359.0, 1.0])
    assert angular_difference(mean, 0.0) < 1e-9
    assert circular_mean([80.0, 100.0]) == pytest.approx(90.0)


def test_circular_mean_of_empty_input_is_zero() -> None:
    assert circular_mean([]) == 0.0


def test_std_dev_needs_two_samples() -> None:
    assert circular_std_dev([]) == 0.0
    assert circular_std_dev([42.0]) == 0.0


def test_std_dev_of_identical_headings_is_zero() -> None:
    assert circular_std_dev([120.0] * 5) == pytest.approx(0.0, abs=1e-5)


def test_std_dev_grows_with_spread() -> None:
    tight = circular_std_dev([358.0, 0.0, 2.0])
    wide = circular_std_dev([0.0, 60.0, 120.0, 180.0])
    assert tight < 3.0
    assert wide > 15.0


def test_mean_resultant_length_bounds() -> None:
    assert mean_resultant_length([10.0, 10.0]) == pytest.approx(1.0)
    assert mean_resultant_length([0.0, 90.0, 180.0, 270.0]) == pytest.approx(0.0, abs=1e-9)
    assert mean_resultant_length([]) == 0.0
