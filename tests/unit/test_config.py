from __future__ import annotations

import pytest

from arnav.config import (
    NavigationSettings,
    coerce_boolish,
    env_bool,
    get_settings,
    reset_settings_cache,
)


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "ARNAV_TARGET_BEARING",
        "ARNAV_TOLERANCE",
        "ARNAV_CALIBRATION_CHECK",
        "ARNAV_CALIBRATION_GATE",
        "ARNAV_PROGRESS_DURATION",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings == NavigationSettings()
    assert settings.tolerance == pytest.approx(20.0)
    assert settings.progress_duration == pytest.approx(3.0)


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("ARNAV_TARGET_BEARING", "-45")
    monkeypatch.setenv("ARNAV_TOLERANCE", "10")
    monkeypatch.setenv("ARNAV_CALIBRATION_CHECK", "off")
    monkeypatch.setenv("ARNAV_PROGRESS_DURATION", "1.5")
    reset_settings_cache()

    settings = get_settings()
    assert settings.target_bearing == pytest.approx(315.0)
    assert settings.tolerance == pytest.approx(10.0)
    assert settings.calibration_check is False
    assert settings.calibration_gate is True
    assert settings.progress_duration == pytest.approx(1.5)


def test_invalid_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("ARNAV_TOLERANCE", "-5")
    monkeypatch.setenv("ARNAV_PROGRESS_DURATION", "soon")
    monkeypatch.setenv("ARNAV_CALIBRATION_GATE", "maybe")
    reset_settings_cache()

    settings = get_settings()
    assert settings.tolerance == pytest.approx(20.0)
    assert settings.progress_duration == pytest.approx(3.0)
    assert settings.calibration_gate is True


def test_settings_are_cached(monkeypatch) -> None:
    first = get_settings()
    monkeypatch.setenv("ARNAV_TOLERANCE", "5")
    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().tolerance == pytest.approx(5.0)


def test_settings_validation() -> None:
    with pytest.raises(ValueError):
        NavigationSettings(tolerance=-1.0)
    with pytest.raises(ValueError):
        NavigationSettings(progress_duration=0.0)
    settings = NavigationSettings().with_overrides(target_bearing=370.0)
    assert settings.target_bearing == pytest.approx(10.0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("yes", True), (" Off ", False), (1, True), (0, False), (True, True), ("", None), (None, None)],
)
def test_coerce_boolish(value, expected) -> None:
    assert coerce_boolish(value) is expected


def test_env_bool_default(monkeypatch) -> None:
    monkeypatch.delenv("ARNAV_SOMETHING", raising=False)
    assert env_bool("ARNAV_SOMETHING", True) is True
    monkeypatch.setenv("ARNAV_SOMETHING", "0")
    assert env_bool("ARNAV_SOMETHING", True) is False
