"""Angle helpers that respect the 0/360 degree wraparound."""

from __future__ import annotations

from math import atan2, cos, degrees, log, radians, sin, sqrt
from typing import Iterable, Tuple


def normalize(angle: float) -> float:
    """Map any angle in degrees onto [0, 360)."""

    wrapped = ((angle % 360.0) + 360.0) % 360.0
    # Tiny negative inputs round up to exactly 360.0 in floating point.
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute separation between two headings, in [0, 180]."""

    return abs(((a - b + 180.0) % 360.0 + 360.0) % 360.0 - 180.0)


def _component_sums(angles: Iterable[float]) -> Tuple[float, float, int]:
    sum_sin = 0.0
    sum_cos = 0.0
    count = 0
    for angle in angles:
        rad = radians(angle)
        sum_sin += sin(rad)
        sum_cos += cos(rad)
        count += 1
    return sum_sin, sum_cos, count


def circular_mean(angles: Iterable[float]) -> float:
    """Mean heading computed from sine/cosine sums.

    Averaging 359 and 1 yields 0 rather than the arithmetic 180. An empty
    input returns 0.
    """

    sum_sin, sum_cos, count = _component_sums(angles)
    if count == 0:
        return 0.0
    return normalize(degrees(atan2(sum_sin, sum_cos)))


def mean_resultant_length(angles: Iterable[float]) -> float:
    sum_sin, sum_cos, count = _component_sums(angles)
    if count == 0:
        return 0.0
    return sqrt((sum_sin / count) ** 2 + (sum_cos / count) ** 2)


def circular_std_dev(angles: Iterable[float]) -> float:
    """Circular standard deviation in degrees, ``sqrt(-2 ln R)``.

    Fewer than two samples carry no spread and return 0.
    """

    samples = list(angles)
    if len(samples) < 2:
        return 0.0
    resultant = mean_resultant_length(samples)
    if resultant >= 1.0:
        return 0.0
    if resultant <= 0.0:
        return 180.0
    return degrees(sqrt(-2.0 * log(resultant)))


__all__ = [
    "angular_difference",
    "circular_mean",
    "circular_std_dev",
    "mean_resultant_length",
    "normalize",
]
