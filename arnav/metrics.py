from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

REGISTRY = CollectorRegistry()

SAMPLES_ACCEPTED_TOTAL = Counter(
    "arnav_samples_accepted_total",
    "Sensor readings accepted by the source arbiter",
    ["source"],
    registry=REGISTRY,
)

SAMPLES_DROPPED_TOTAL = Counter(
    "arnav_samples_dropped_total",
    "Sensor readings dropped by the source arbiter",
    ["source", "reason"],
    registry=REGISTRY,
)

REJECTED_JUMPS_TOTAL = Counter(
    "arnav_rejected_jumps_total",
    "Raw heading jumps rejected by the stabilizer",
    ["zone"],
    registry=REGISTRY,
)

CALIBRATION_TRANSITIONS_TOTAL = Counter(
    "arnav_calibration_transitions_total",
    "Calibration quality transitions",
    ["from_quality", "to_quality"],
    registry=REGISTRY,
)

HEADING_STD_DEV_DEGREES = Histogram(
    "arnav_heading_std_dev_degrees",
    "Circular standard deviation of raw headings at each calibration evaluation",
    buckets=(1.0, 2.0, 4.0, 8.0, 15.0, 30.0, 60.0, 180.0),
    registry=REGISTRY,
)

SENSOR_ERRORS_TOTAL = Counter(
    "arnav_sensor_errors_total",
    "Sensor warnings and errors reported to the host",
    ["severity"],
    registry=REGISTRY,
)


def observe_sample(source: str, accepted: bool, reason: str = "invalid") -> None:
    """Count one reading handled by the arbiter."""

    if accepted:
        SAMPLES_ACCEPTED_TOTAL.labels(source=source).inc()
    else:
        SAMPLES_DROPPED_TOTAL.labels(source=source, reason=reason).inc()


def observe_rejected_jump(gimbal_zone: bool) -> None:
    REJECTED_JUMPS_TOTAL.labels(zone="gimbal" if gimbal_zone else "normal").inc()


def observe_calibration(
    std_dev: float, previous: str | None = None, current: str | None = None
) -> None:
    HEADING_STD_DEV_DEGREES.observe(std_dev)
    if previous is not None and current is not None and previous != current:
        CALIBRATION_TRANSITIONS_TOTAL.labels(
            from_quality=previous, to_quality=current
        ).inc()


def observe_sensor_problem(fatal: bool) -> None:
    SENSOR_ERRORS_TOTAL.labels(severity="fatal" if fatal else "warning").inc()


__all__ = [
    "CALIBRATION_TRANSITIONS_TOTAL",
    "HEADING_STD_DEV_DEGREES",
    "REGISTRY",
    "REJECTED_JUMPS_TOTAL",
    "SAMPLES_ACCEPTED_TOTAL",
    "SAMPLES_DROPPED_TOTAL",
    "SENSOR_ERRORS_TOTAL",
    "observe_calibration",
    "observe_rejected_jump",
    "observe_sample",
    "observe_sensor_problem",
]
