"""Start-up calibration gate that holds navigation back on a bad compass."""

from __future__ import annotations

from enum import Enum

from .calibration import QualityLevel


class GateState(str, Enum):
    NONE = "none"
    WAITING = "waiting"
    BLOCKING = "blocking"
    PASSED = "passed"


class CalibrationGate:
    """Decides whether turn guidance may be shown yet.

    ``waiting`` collects warm-up data, ``blocking`` means the compass was
    judged poor and the host should ask the user to calibrate, ``passed``
    releases navigation. Once passed, later degradations are reported through
    calibration events only; the gate does not close again until
    :meth:`open_session` is called.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._state = GateState.NONE

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def holds_navigation(self) -> bool:
        return self._state in {GateState.WAITING, GateState.BLOCKING}

    def open_session(self, calibration_check: bool) -> GateState:
        if self.enabled and calibration_check:
            self._state = GateState.WAITING
        else:
            self._state = GateState.PASSED
        return self._state

    def on_quality(self, quality: QualityLevel) -> GateState:
        if self._state == GateState.WAITING:
            if quality is QualityLevel.POOR:
                self._state = GateState.BLOCKING
            else:
                self._state = GateState.PASSED
        elif self._state == GateState.BLOCKING:
            if quality is not QualityLevel.POOR:
                self._state = GateState.PASSED
        return self._state

    def reset(self) -> GateState:
        self._state = GateState.NONE
        return self._state


__all__ = ["CalibrationGate", "GateState"]
