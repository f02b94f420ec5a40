from arnav import metrics


def _value(name, labels=None):
    return metrics.REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_sample_counters():
    accepted_before = _value("arnav_samples_accepted_total", {"source": "webkit-compass"})
    dropped_before = _value(
        "arnav_samples_dropped_total", {"source": "webkit-compass", "reason": "invalid"}
    )
    metrics.observe_sample("webkit-compass", True)
    metrics.observe_sample("webkit-compass", False)
    assert _value("arnav_samples_accepted_total", {"source": "webkit-compass"}) == accepted_before + 1
    assert (
        _value("arnav_samples_dropped_total", {"source": "webkit-compass", "reason": "invalid"})
        == dropped_before + 1
    )


def test_rejected_jump_zone_label():
    before = _value("arnav_rejected_jumps_total", {"zone": "gimbal"})
    metrics.observe_rejected_jump(gimbal_zone=True)
    assert _value("arnav_rejected_jumps_total", {"zone": "gimbal"}) == before + 1


def test_calibration_transitions_only_on_change():
    labels = {"from_quality": "fair", "to_quality": "good"}
    before = _value("arnav_calibration_transitions_total", labels)
    count_before = _value("arnav_heading_std_dev_degrees_count")
    metrics.observe_calibration(3.0, "fair", "good")
    metrics.observe_calibration(3.0, "good", "good")
    assert _value("arnav_calibration_transitions_total", labels) == before + 1
    assert _value("arnav_heading_std_dev_degrees_count") == count_before + 2


def test_sensor_problem_severity():
    before = _value("arnav_sensor_errors_total", {"severity": "warning"})
    metrics.observe_sensor_problem(fatal=False)
    assert _value("arnav_sensor_errors_total", {"severity": "warning"}) == before + 1
