"""Core domain models for isovibe."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from math import isfinite, sqrt


class Axis(StrEnum):
    """Measurement axes of a tri-axial vibration sensor."""

    H = "h"
    V = "v"
    A = "a"


class Quantity(StrEnum):
    """Physical quantities that carry threshold sets."""

    VELOCITY = "velocity"
    TEMPERATURE = "temperature"


class StatusLevel(IntEnum):
    """Ordered severity levels produced by numeric classification."""

    NORMAL = 0
    WARNING = 1
    CONCERN = 2
    CRITICAL = 3


class Connectivity(StrEnum):
    """Link state reported for one sensor."""

    ONLINE = "online"
    OFFLINE = "offline"


class OperationalMode(StrEnum):
    """Operating mode of the monitored machine."""

    RUNNING = "running"
    STANDBY = "standby"


class SensorStatus(StrEnum):
    """Single status assigned to a sensor for display and fleet counts."""

    NORMAL = "normal"
    WARNING = "warning"
    CONCERN = "concern"
    CRITICAL = "critical"
    STANDBY = "standby"
    LOST = "lost"

    @classmethod
    def from_level(cls, level: StatusLevel) -> SensorStatus:
        """Map a numeric severity level onto the sensor status vocabulary."""
        return _LEVEL_TO_STATUS[level]


_LEVEL_TO_STATUS: dict[StatusLevel, SensorStatus] = {
    StatusLevel.NORMAL: SensorStatus.NORMAL,
    StatusLevel.WARNING: SensorStatus.WARNING,
    StatusLevel.CONCERN: SensorStatus.CONCERN,
    StatusLevel.CRITICAL: SensorStatus.CRITICAL,
}


class InvalidThresholdOrder(ValueError):
    """Raised when threshold boundaries are not ascending."""


@dataclass(frozen=True, slots=True)
class ThresholdSet:
    """Three ascending boundaries separating Normal/Warning/Concern/Critical."""

    min: float
    medium: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.medium or self.medium > self.max:
            raise InvalidThresholdOrder(
                f"thresholds must be ascending: min={self.min}, medium={self.medium}, max={self.max}"
            )

    @property
    def has_unusable_boundary(self) -> bool:
        """Whether any boundary is zero, negative or non-finite."""
        return any(not isfinite(value) or value <= 0 for value in self.as_tuple())

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.min, self.medium, self.max)

    @classmethod
    def sorted_from(cls, min: float, medium: float, max: float) -> ThresholdSet:
        """Build a set from boundaries in any order."""
        low, mid, high = sorted((min, medium, max))
        return cls(min=low, medium=mid, max=high)


@dataclass(frozen=True, slots=True)
class AxisConfig:
    """Per-sensor acquisition calibration."""

    g_scale: float
    fmax: float
    lor: int

    def __post_init__(self) -> None:
        if not isfinite(self.g_scale) or self.g_scale <= 0:
            raise ValueError("g_scale must be > 0")
        if not isfinite(self.fmax) or self.fmax <= 0:
            raise ValueError("fmax must be > 0")
        if self.lor < 2:
            raise ValueError("lor must be >= 2")

    @property
    def sample_rate_hz(self) -> float:
        return self.fmax

    @property
    def acquisition_seconds(self) -> float:
        return self.lor / self.fmax

    @property
    def frequency_resolution_hz(self) -> float:
        return self.fmax / self.lor


@dataclass(frozen=True, slots=True)
class SpectrumPoint:
    """One bin of a one-sided magnitude spectrum."""

    frequency: float
    magnitude: float

    def __post_init__(self) -> None:
        if not isfinite(self.frequency) or self.frequency < 0:
            raise ValueError("frequency must be finite and >= 0")
        if not isfinite(self.magnitude) or self.magnitude < 0:
            raise ValueError("magnitude must be finite and >= 0")


@dataclass(frozen=True, slots=True)
class PeakStat:
    """Spectral peak with its sinusoidal RMS equivalent."""

    frequency: float
    magnitude: float
    rms: float

    @classmethod
    def from_peak(cls, frequency: float, magnitude: float) -> PeakStat:
        return cls(frequency=frequency, magnitude=magnitude, rms=magnitude / sqrt(2.0))


@dataclass(frozen=True, slots=True)
class AxisStats:
    """Governing measurement of one axis used for classification."""

    accel_top_peak: float
    velocity_top_peak: float
    dominant_freq: float
    has_data: bool = True

    @classmethod
    def no_data(cls) -> AxisStats:
        """Zeroed stats marking an axis that produced no usable samples."""
        return cls(accel_top_peak=0.0, velocity_top_peak=0.0, dominant_freq=0.0, has_data=False)


@dataclass(frozen=True, slots=True)
class VelocityWaveformStats:
    """Time-domain velocity summary in mm/s."""

    rms: float
    peak: float
    peak_to_peak: float

    def __post_init__(self) -> None:
        for name in ("rms", "peak", "peak_to_peak"):
            value = getattr(self, name)
            if not isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0")

    @classmethod
    def zero(cls) -> VelocityWaveformStats:
        return cls(rms=0.0, peak=0.0, peak_to_peak=0.0)
