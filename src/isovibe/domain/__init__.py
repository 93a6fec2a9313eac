"""Domain models for vibration analysis and condition states."""

from isovibe.domain.models import (
    Axis,
    AxisConfig,
    AxisStats,
    Connectivity,
    InvalidThresholdOrder,
    OperationalMode,
    PeakStat,
    Quantity,
    SensorStatus,
    SpectrumPoint,
    StatusLevel,
    ThresholdSet,
    VelocityWaveformStats,
)

__all__ = [
    "Axis",
    "AxisConfig",
    "AxisStats",
    "Connectivity",
    "InvalidThresholdOrder",
    "OperationalMode",
    "PeakStat",
    "Quantity",
    "SensorStatus",
    "SpectrumPoint",
    "StatusLevel",
    "ThresholdSet",
    "VelocityWaveformStats",
]
