"""Tunables shared by the heading, calibration and alignment engines."""

from __future__ import annotations

# Gimbal-lock handling (tilt within 90 +/- GIMBAL_LOCK_ZONE_DEGREES)
GIMBAL_LOCK_ZONE_DEGREES = 15.0
MAX_JUMP_NORMAL_DEGREES = 90.0
MAX_JUMP_GIMBAL_DEGREES = 30.0
SMOOTHING_WINDOW_NORMAL = 5
SMOOTHING_WINDOW_GIMBAL = 12
REJECT_THRESHOLD_NORMAL = 3
REJECT_THRESHOLD_GIMBAL = 10

# Calibration quality assessment
HEADING_STD_POOR_DEGREES = 15.0
HEADING_STD_FAIR_DEGREES = 8.0
JUMP_RATE_POOR = 0.30
JUMP_RATE_FAIR = 0.15
MAG_FIELD_MIN_UT = 20.0
MAG_FIELD_MAX_UT = 70.0
CALIBRATION_SAMPLE_WINDOW = 40
CALIBRATION_WARMUP_SAMPLES = 10
CALIBRATION_CHECK_INTERVAL_SECONDS = 2.0

# Source arbitration timeouts
FALLBACK_TIMEOUT_SECONDS = 5.0
FATAL_TIMEOUT_SECONDS = 3.0
# Tilt reported for compass-heading events that carry no beta
DEFAULT_COMPASS_TILT_DEGREES = 90.0

# Navigation defaults
DEFAULT_TOLERANCE_DEGREES = 20.0
DEFAULT_PROGRESS_SECONDS = 3.0
DEFAULT_MAX_SEGMENTS = 5
