"""Tests for end-to-end sensor and fleet evaluation."""

from __future__ import annotations

import numpy as np
import pytest

from isovibe.config import EngineSettings
from isovibe.domain import Axis, AxisConfig, Connectivity, OperationalMode, SensorStatus, StatusLevel
from isovibe.engine import SensorReading, evaluate_fleet, evaluate_sensor
from isovibe.thresholds import PartialThresholds, SensorThresholdContext, ThresholdOverride


CONFIG = AxisConfig(g_scale=16.0, fmax=400.0, lor=256)
MACHINE_UUID = "3f2b8c1e-9a4d-4e6b-8f10-2c7d5a9e0b41"


def _tone(amplitude_counts: float, freq_hz: float = 50.0) -> np.ndarray:
    t = np.arange(CONFIG.lor) / CONFIG.fmax
    return np.round(amplitude_counts * np.sin(2.0 * np.pi * freq_hz * t)).astype(np.int64)


def _reading(
    buffers: dict[Axis, np.ndarray],
    *,
    machine_class: str | None = "smallMachine",
    connectivity: Connectivity = Connectivity.ONLINE,
    operational_mode: OperationalMode = OperationalMode.RUNNING,
    temperature_c: float | None = None,
    sensor_id: str = "S-01",
) -> SensorReading:
    return SensorReading(
        sensor_id=sensor_id,
        context=SensorThresholdContext(machine_id=MACHINE_UUID, machine_name="Pump A", machine_class=machine_class),
        config=CONFIG,
        buffers=buffers,
        connectivity=connectivity,
        operational_mode=operational_mode,
        temperature_c=temperature_c,
    )


def test_loud_axis_drives_sensor_to_critical() -> None:
    quiet = np.zeros(CONFIG.lor, dtype=np.int64)
    evaluation = evaluate_sensor(_reading({Axis.H: _tone(1000.0), Axis.V: quiet, Axis.A: quiet}))

    assert evaluation.status == SensorStatus.CRITICAL
    assert evaluation.axis(Axis.H).level == StatusLevel.CRITICAL
    assert evaluation.axis(Axis.V).level == StatusLevel.NORMAL
    assert evaluation.axis(Axis.H).stats.dominant_freq == pytest.approx(50.0, abs=CONFIG.frequency_resolution_hz)
    assert any("axis h" in reason for reason in evaluation.reasons)


def test_quiet_sensor_is_normal() -> None:
    buffers = {axis: _tone(10.0) for axis in Axis}
    evaluation = evaluate_sensor(_reading(buffers))

    assert evaluation.status == SensorStatus.NORMAL
    assert all(axis_eval.thresholds.max == 4.5 for axis_eval in evaluation.axes)


def test_override_can_raise_limits_above_reading() -> None:
    buffers = {Axis.H: _tone(1000.0)}
    velocity = evaluate_sensor(_reading(buffers)).axis(Axis.H).stats.velocity_top_peak
    override = ThresholdOverride(
        machine_id=MACHINE_UUID,
        velocity=PartialThresholds(min=velocity * 2, medium=velocity * 3, max=velocity * 4),
    )

    evaluation = evaluate_sensor(_reading(buffers), [override])

    assert evaluation.axis(Axis.H).level == StatusLevel.NORMAL
    assert evaluation.status == SensorStatus.NORMAL


def test_offline_sensor_is_lost_without_analysis() -> None:
    evaluation = evaluate_sensor(_reading({Axis.H: _tone(1000.0)}, connectivity=Connectivity.OFFLINE))

    assert evaluation.status == SensorStatus.LOST
    assert all(axis_eval.level is None for axis_eval in evaluation.axes)


def test_standby_mode_is_reported_as_standby() -> None:
    evaluation = evaluate_sensor(_reading({Axis.H: _tone(1000.0)}, operational_mode=OperationalMode.STANDBY))
    assert evaluation.status == SensorStatus.STANDBY


def test_no_buffers_never_reads_as_normal() -> None:
    evaluation = evaluate_sensor(_reading({}))

    assert evaluation.status == SensorStatus.STANDBY
    assert evaluation.reasons.count("no data on axis h") == 1


def test_temperature_is_classified_separately() -> None:
    quiet = {axis: np.zeros(CONFIG.lor, dtype=np.int64) for axis in Axis}
    evaluation = evaluate_sensor(_reading(quiet, temperature_c=41.0))

    assert evaluation.temperature_level == StatusLevel.CONCERN
    assert evaluation.status == SensorStatus.NORMAL


def test_reading_rejects_non_finite_temperature() -> None:
    with pytest.raises(ValueError, match="temperature_c"):
        _reading({}, temperature_c=float("nan"))


def test_fleet_evaluation_tallies_statuses() -> None:
    readings = [
        _reading({Axis.H: _tone(1000.0)}, sensor_id="S-01"),
        _reading({axis: _tone(10.0) for axis in Axis}, sensor_id="S-02"),
        _reading({}, sensor_id="S-03", connectivity=Connectivity.OFFLINE),
        _reading({}, sensor_id="S-04", operational_mode=OperationalMode.STANDBY),
    ]

    fleet = evaluate_fleet(readings, settings=EngineSettings(peak_count=3))

    assert [evaluation.sensor_id for evaluation in fleet.sensors] == ["S-01", "S-02", "S-03", "S-04"]
    assert fleet.summary.critical == 1
    assert fleet.summary.normal == 1
    assert fleet.summary.lost == 1
    assert fleet.summary.standby == 1
    assert fleet.summary.total == len(readings)


def test_gravity_offset_on_vertical_axis_stays_normal() -> None:
    one_g_counts = 4096 / CONFIG.g_scale
    buffers = {
        Axis.H: _tone(10.0),
        Axis.V: _tone(10.0) + one_g_counts,
        Axis.A: _tone(10.0),
    }

    evaluation = evaluate_sensor(_reading(buffers, machine_class="largeFlexible"))

    assert [axis_eval.level for axis_eval in evaluation.axes] == [StatusLevel.NORMAL] * 3
    assert evaluation.status == SensorStatus.NORMAL


def test_reason_pairs_velocity_peak_with_its_own_frequency() -> None:
    t = np.arange(CONFIG.lor) / CONFIG.fmax
    signal = np.round(1000.0 * np.sin(2.0 * np.pi * 150.0 * t) + 200.0 * np.sin(2.0 * np.pi * 12.5 * t))

    evaluation = evaluate_sensor(_reading({Axis.H: signal}))

    h = evaluation.axis(Axis.H)
    assert h.stats.dominant_freq == pytest.approx(12.5)
    assert any("at 12.50 Hz" in reason for reason in evaluation.reasons)
    assert h.waveform.rms > 0.0
