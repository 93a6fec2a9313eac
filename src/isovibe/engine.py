"""End-to-end evaluation of one sensor or a fleet from typed readings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from math import isfinite

import numpy.typing as npt

from isovibe.analysis.axis import AxisAnalysis, analyze_sensor
from isovibe.config import EngineSettings
from isovibe.domain.models import (
    Axis,
    AxisConfig,
    AxisStats,
    Connectivity,
    OperationalMode,
    Quantity,
    SensorStatus,
    StatusLevel,
    ThresholdSet,
    VelocityWaveformStats,
)
from isovibe.status.aggregate import FleetSummary, fleet_summary, sensor_status
from isovibe.status.classifier import classify_axis, classify_temperature
from isovibe.thresholds.catalog import ISO_10816_3_CLASSES, MachineClassInfo
from isovibe.thresholds.contracts import SensorThresholdContext, SystemDefaults, ThresholdOverride
from isovibe.thresholds.resolver import resolve, resolve_axes


@dataclass(frozen=True, slots=True)
class SensorReading:
    """Validated inputs for one sensor acquisition."""

    sensor_id: str
    context: SensorThresholdContext
    config: AxisConfig
    buffers: Mapping[Axis, npt.ArrayLike] = field(default_factory=dict)
    connectivity: Connectivity = Connectivity.ONLINE
    operational_mode: OperationalMode = OperationalMode.RUNNING
    temperature_c: float | None = None

    def __post_init__(self) -> None:
        if not self.sensor_id.strip():
            raise ValueError("sensor_id must not be empty")
        if self.temperature_c is not None and not isfinite(self.temperature_c):
            raise ValueError("temperature_c must be finite")


@dataclass(frozen=True, slots=True)
class AxisEvaluation:
    """Classification outcome for one axis."""

    axis: Axis
    stats: AxisStats
    thresholds: ThresholdSet
    level: StatusLevel | None
    waveform: VelocityWaveformStats = VelocityWaveformStats.zero()


@dataclass(frozen=True, slots=True)
class SensorEvaluation:
    """Status and supporting evidence produced for one sensor."""

    sensor_id: str
    status: SensorStatus
    axes: tuple[AxisEvaluation, ...]
    temperature_level: StatusLevel | None = None
    reasons: tuple[str, ...] = ()

    def axis(self, axis: Axis) -> AxisEvaluation:
        for evaluation in self.axes:
            if evaluation.axis == axis:
                return evaluation
        raise KeyError(axis)


@dataclass(frozen=True, slots=True)
class FleetEvaluation:
    """Per-sensor evaluations plus their status tally."""

    sensors: tuple[SensorEvaluation, ...]
    summary: FleetSummary


def evaluate_sensor(
    reading: SensorReading,
    overrides: Sequence[ThresholdOverride] = (),
    *,
    settings: EngineSettings | None = None,
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
    defaults: SystemDefaults = SystemDefaults(),
) -> SensorEvaluation:
    """Analyze, resolve thresholds, classify each axis and reduce to a sensor status."""
    active = settings if settings is not None else EngineSettings()
    reasons: list[str] = []

    analyses: Mapping[Axis, AxisAnalysis]
    if reading.connectivity == Connectivity.OFFLINE:
        analyses = {axis: AxisAnalysis.no_data() for axis in Axis}
        reasons.append(f"sensor offline: {reading.sensor_id}")
    else:
        analyses = analyze_sensor(
            reading.buffers,
            reading.config,
            peak_count=active.peak_count,
            pad_to_pow2=active.pad_to_pow2,
            velocity_low_cut_hz=active.velocity_low_cut_hz,
        )

    resolved = resolve_axes(reading.context, overrides, class_table, defaults=defaults)

    axes: list[AxisEvaluation] = []
    for axis in Axis:
        analysis = analyses[axis]
        stats = analysis.stats
        thresholds = resolved[axis].thresholds
        level = classify_axis(stats, thresholds, fallback=defaults.velocity)
        if level is None:
            if reading.connectivity != Connectivity.OFFLINE:
                reasons.append(f"no data on axis {axis.value}")
        elif level > StatusLevel.NORMAL:
            reasons.append(
                f"{level.name.lower()} on axis {axis.value}: "
                f"{stats.velocity_top_peak:.3f} mm/s at {stats.dominant_freq:.2f} Hz"
            )
        axes.append(
            AxisEvaluation(
                axis=axis,
                stats=stats,
                thresholds=thresholds,
                level=level,
                waveform=analysis.waveform,
            )
        )

    temperature_level: StatusLevel | None = None
    if reading.temperature_c is not None:
        temperature_thresholds = resolve(
            reading.context,
            overrides,
            class_table,
            quantity=Quantity.TEMPERATURE,
            defaults=defaults,
        ).thresholds
        temperature_level = classify_temperature(
            reading.temperature_c,
            temperature_thresholds,
            fallback=defaults.temperature,
        )
        if temperature_level > StatusLevel.NORMAL:
            reasons.append(f"{temperature_level.name.lower()} temperature: {reading.temperature_c:.1f} C")

    by_axis = {evaluation.axis: evaluation.level for evaluation in axes}
    status = sensor_status(
        by_axis[Axis.H],
        by_axis[Axis.V],
        by_axis[Axis.A],
        reading.connectivity,
        reading.operational_mode,
    )
    return SensorEvaluation(
        sensor_id=reading.sensor_id,
        status=status,
        axes=tuple(axes),
        temperature_level=temperature_level,
        reasons=tuple(reasons),
    )


def evaluate_fleet(
    readings: Sequence[SensorReading],
    overrides: Sequence[ThresholdOverride] = (),
    *,
    settings: EngineSettings | None = None,
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
    defaults: SystemDefaults = SystemDefaults(),
) -> FleetEvaluation:
    """Evaluate every reading independently and tally the resulting statuses."""
    evaluations = tuple(
        evaluate_sensor(
            reading,
            overrides,
            settings=settings,
            class_table=class_table,
            defaults=defaults,
        )
        for reading in readings
    )
    return FleetEvaluation(
        sensors=evaluations,
        summary=fleet_summary(evaluation.status for evaluation in evaluations),
    )
