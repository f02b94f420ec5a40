"""Pure direction helpers: path bearings, compass labels and turn decisions.

Path coordinates follow the screen/SVG convention where Y grows downward,
so a segment pointing "up" on screen maps to a bearing of 0 (north).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import atan2, degrees, floor
from typing import Dict, List, Optional, Sequence, Tuple

from .angles import angular_difference, normalize
from .constants import DEFAULT_MAX_SEGMENTS, DEFAULT_TOLERANCE_DEGREES

Point = Tuple[float, float]


class TurnDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    ALIGNED = "aligned"


COMPASS_LABELS: Dict[str, Tuple[str, ...]] = {
    "en": (
        "North", "North-Northeast", "Northeast", "East-Northeast",
        "East", "East-Southeast", "Southeast", "South-Southeast",
        "South", "South-Southwest", "Southwest", "West-Southwest",
        "West", "West-Northwest", "Northwest", "North-Northwest",
    ),
    "tr": (
        "Kuzey", "Kuzey-Kuzeydoğu", "Kuzeydoğu", "Doğu-Kuzeydoğu",
        "Doğu", "Doğu-Güneydoğu", "Güneydoğu", "Güney-Güneydoğu",
        "Güney", "Güney-Güneybatı", "Güneybatı", "Batı-Güneybatı",
        "Batı", "Batı-Kuzeybatı", "Kuzeybatı", "Kuzey-Kuzeybatı",
    ),
}


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class AlignmentDecision:
    is_aligned: bool
    turn_direction: TurnDirection


@dataclass(frozen=True)
class DirectionResult:
    compass_angle: float
    compass: str
    start_point: Point
    end_point: Point
    dx: float
    dy: float
    segments_used: int


def compass_label(bearing: float, locale: str = "en") -> str:
    """Name of the nearest of the 16 compass points (22.5 degree steps)."""

    try:
        labels = COMPASS_LABELS[locale]
    except KeyError:
        raise ValueError(f"Unknown compass locale: {locale}") from None
    # Half steps round up: 11.25 is already North-Northeast.
    return labels[int(floor(normalize(bearing) / 22.5 + 0.5)) % 16]


def is_aligned(current: float, target: float, tolerance: float) -> bool:
    return angular_difference(current, target) <= tolerance


def turn_direction(
    current: float, target: float, tolerance: float = DEFAULT_TOLERANCE_DEGREES
) -> TurnDirection:
    """Shortest turn toward *target*; an exactly opposite target turns right."""

    if is_aligned(current, target, tolerance):
        return TurnDirection.ALIGNED
    clockwise = (target - current + 360.0) % 360.0
    counter_clockwise = (current - target + 360.0) % 360.0
    if clockwise <= counter_clockwise:
        return TurnDirection.RIGHT
    return TurnDirection.LEFT


def decide_alignment(
    current: float, target: float, tolerance: float = DEFAULT_TOLERANCE_DEGREES
) -> AlignmentDecision:
    direction = turn_direction(current, target, tolerance)
    return AlignmentDecision(
        is_aligned=direction is TurnDirection.ALIGNED, turn_direction=direction
    )


def segments_to_points(segments: Sequence[Segment]) -> List[Point]:
    if not segments:
        return []
    points: List[Point] = [(segments[0].x1, segments[0].y1)]
    for segment in segments:
        points.append((segment.x2, segment.y2))
    return points


def points_to_segments(points: Sequence[Sequence[float]]) -> List[Segment]:
    if not points or len(points) < 2:
        return []
    return [
        Segment(x1=start[0], y1=start[1], x2=end[0], y2=end[1])
        for start, end in zip(points, points[1:])
    ]


def _bearing(start: Sequence[float], end: Sequence[float]) -> Tuple[float, float, float]:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    return normalize(degrees(atan2(dx, -dy))), dx, dy


def bearing_from_polyline(
    points: Sequence[Sequence[float]], max_segments_used: int = DEFAULT_MAX_SEGMENTS
) -> Optional[float]:
    """Bearing from the first point to the end of the first segments.

    Returns ``None`` when the polyline has no segment to measure.
    """

    if max_segments_used < 1 or not points or len(points) < 2:
        return None
    retained = points[: max_segments_used + 1]
    bearing, _, _ = _bearing(retained[0], retained[-1])
    return bearing


class DirectionCalculator:
    """Segment-based bearing calculator for a drawn route."""

    def __init__(
        self,
        segments: Optional[Sequence[Segment]] = None,
        max_segments: int = DEFAULT_MAX_SEGMENTS,
        locale: str = "en",
    ) -> None:
        if max_segments < 1:
            raise ValueError("max_segments must be positive")
        self.segments: List[Segment] = list(segments or [])
        self.max_segments = max_segments
        self.locale = locale

    def set_segments(
        self, segments: Optional[Sequence[Segment]], max_segments: Optional[int] = None
    ) -> "DirectionCalculator":
        self.segments = list(segments or [])
        if max_segments is not None:
            self.max_segments = max_segments
        return self

    def set_path_from_points(
        self, points: Sequence[Sequence[float]], max_segments: Optional[int] = None
    ) -> "DirectionCalculator":
        return self.set_segments(points_to_segments(points), max_segments)

    def calculate(self) -> Optional[DirectionResult]:
        if not self.segments:
            return None
        used = self.segments[: self.max_segments]
        start = (used[0].x1, used[0].y1)
        end = (used[-1].x2, used[-1].y2)
        bearing, dx, dy = _bearing(start, end)
        return DirectionResult(
            compass_angle=bearing,
            compass=compass_label(bearing, self.locale),
            start_point=start,
            end_point=end,
            dx=dx,
            dy=dy,
            segments_used=len(used),
        )

    def state(self) -> Dict[str, int]:
        return {"segment_count": len(self.segments), "max_segments": self.max_segments}


__all__ = [
    "AlignmentDecision",
    "COMPASS_LABELS",
    "DirectionCalculator",
    "DirectionResult",
    "Segment",
    "TurnDirection",
    "angular_difference",
    "bearing_from_polyline",
    "compass_label",
    "decide_alignment",
    "is_aligned",
    "points_to_segments",
    "segments_to_points",
    "turn_direction",
]
