"""Configuration helpers for the navigation engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any

from .angles import normalize
from .constants import DEFAULT_PROGRESS_SECONDS, DEFAULT_TOLERANCE_DEGREES

__all__ = [
    "NavigationSettings",
    "coerce_boolish",
    "env_bool",
    "get_settings",
    "reset_settings_cache",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class NavigationSettings:
    target_bearing: float = 0.0
    tolerance: float = DEFAULT_TOLERANCE_DEGREES
    calibration_check: bool = True
    calibration_gate: bool = True
    progress_duration: float = DEFAULT_PROGRESS_SECONDS

    def __post_init__(self) -> None:
        if self.tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        if self.progress_duration <= 0:
            raise ValueError("progress_duration must be positive")
        object.__setattr__(self, "target_bearing", normalize(self.target_bearing))

    def with_overrides(self, **changes: Any) -> "NavigationSettings":
        return replace(self, **changes)


@lru_cache(maxsize=1)
def get_settings() -> NavigationSettings:
    """Return cached settings read from ``ARNAV_*`` environment variables."""

    return NavigationSettings(
        target_bearing=_float_env("ARNAV_TARGET_BEARING", 0.0),
        tolerance=_float_env("ARNAV_TOLERANCE", DEFAULT_TOLERANCE_DEGREES, minimum=0.0),
        calibration_check=env_bool("ARNAV_CALIBRATION_CHECK", True),
        calibration_gate=env_bool("ARNAV_CALIBRATION_GATE", True),
        progress_duration=_float_env(
            "ARNAV_PROGRESS_DURATION", DEFAULT_PROGRESS_SECONDS, minimum=1e-3
        ),
    )


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = coerce_boolish(os.getenv(name))
    if value is None:
        return default
    return value


def _float_env(name: str, default: float, *, minimum: float | None = None) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return default
    return parsed


def coerce_boolish(value: Any) -> bool | None:
    """Read an env string or a payload flag as a boolean, ``None`` if unclear."""

    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None
