"""AR navigation package exports."""

from .alignment import AlignmentSnapshot, AlignmentTracker
from .arbiter import HeadingSourceArbiter
from .calibration import CalibrationQualityAssessor, CalibrationReport, QualityLevel
from .calibration_gate import CalibrationGate, GateState
from .config import NavigationSettings, get_settings
from .direction import (
    DirectionCalculator,
    Segment,
    TurnDirection,
    bearing_from_polyline,
    compass_label,
    turn_direction,
)
from .events import EventBus, EventRecorder
from .session import NavigationSession, SensorBinding, SessionSnapshot
from .stabilizer import HeadingStabilizer

__all__ = [
    "AlignmentSnapshot",
    "AlignmentTracker",
    "CalibrationGate",
    "CalibrationQualityAssessor",
    "CalibrationReport",
    "DirectionCalculator",
    "EventBus",
    "EventRecorder",
    "GateState",
    "HeadingSourceArbiter",
    "HeadingStabilizer",
    "NavigationSession",
    "NavigationSettings",
    "QualityLevel",
    "Segment",
    "SensorBinding",
    "SessionSnapshot",
    "TurnDirection",
    "bearing_from_polyline",
    "compass_label",
    "get_settings",
    "turn_direction",
]
