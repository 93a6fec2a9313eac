"""Per-axis analysis from raw ADC buffers to governing AxisStats.

Windowing policy: every FFT computed here runs on a mean-removed,
Hann-tapered buffer, for both the acceleration (g) and the velocity (mm/s)
spectrum. `compute_spectrum` itself never windows. Velocity bins at or
below the low cut are zeroed so a gravity offset or slow drift never
dominates the velocity peak.

The classified velocity peak and `dominant_freq` both come from the
velocity spectrum.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
from scipy.signal import detrend

from isovibe.domain.models import Axis, AxisConfig, AxisStats, VelocityWaveformStats
from isovibe.transforms.frequency import (
    DEFAULT_VELOCITY_LOW_CUT_HZ,
    Spectrum,
    compute_spectrum,
    integrate_spectrum,
)
from isovibe.transforms.peaks import DEFAULT_PEAK_COUNT, PeakSearchResult, find_top_peaks
from isovibe.transforms.units import g_to_si, integrate_to_velocity, to_acceleration_g
from isovibe.transforms.windowing import apply_hann


FloatArray = npt.NDArray[np.float64]

MIN_SPECTRUM_BINS = 3

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AxisAnalysis:
    """Spectra, ranked peaks, velocity waveform and governing stats for one axis."""

    stats: AxisStats
    acceleration: Spectrum
    velocity: Spectrum
    acceleration_peaks: PeakSearchResult
    velocity_peaks: PeakSearchResult
    waveform: VelocityWaveformStats = VelocityWaveformStats.zero()

    @classmethod
    def no_data(cls) -> AxisAnalysis:
        empty = Spectrum.empty()
        no_peaks = find_top_peaks(empty.magnitude, empty.frequency, 0)
        return cls(
            stats=AxisStats.no_data(),
            acceleration=empty,
            velocity=empty,
            acceleration_peaks=no_peaks,
            velocity_peaks=no_peaks,
            waveform=VelocityWaveformStats.zero(),
        )


@dataclass(frozen=True, slots=True)
class OverallVibrationStats:
    """Time-domain RMS and absolute peak across all axis samples."""

    rms: float
    peak: float


def analyze_axis(
    raw_adc: npt.ArrayLike,
    config: AxisConfig,
    *,
    peak_count: int = DEFAULT_PEAK_COUNT,
    pad_to_pow2: bool = False,
    velocity_low_cut_hz: float = DEFAULT_VELOCITY_LOW_CUT_HZ,
) -> AxisAnalysis:
    """Convert one axis buffer to physical units and extract its top peaks.

    Buffers that are empty, non-finite or too short to yield three spectrum
    bins report no data.
    """
    counts = np.asarray(raw_adc, dtype=np.float64).reshape(-1)
    if counts.size == 0 or not np.all(np.isfinite(counts)):
        logger.debug("axis buffer empty or non-finite; reporting no data")
        return AxisAnalysis.no_data()

    accel_g = detrend(to_acceleration_g(counts, config.g_scale), type="constant")
    accel_spectrum = compute_spectrum(
        apply_hann(accel_g),
        config.sample_rate_hz,
        pad_to_pow2=pad_to_pow2,
    )
    if accel_spectrum.magnitude.size < MIN_SPECTRUM_BINS:
        logger.debug("%d-sample buffer is too short for a spectrum; reporting no data", counts.size)
        return AxisAnalysis.no_data()

    accel_mm_s2 = g_to_si(accel_g)
    velocity_spectrum = integrate_spectrum(
        compute_spectrum(apply_hann(accel_mm_s2), config.sample_rate_hz, pad_to_pow2=pad_to_pow2),
        low_cut_hz=velocity_low_cut_hz,
    )

    accel_peaks = find_top_peaks(accel_spectrum.magnitude, accel_spectrum.frequency, peak_count)
    velocity_peaks = find_top_peaks(velocity_spectrum.magnitude, velocity_spectrum.frequency, peak_count)

    accel_top = accel_peaks.top
    velocity_top = velocity_peaks.top
    if velocity_top is None:
        logger.debug("no velocity peak above %.2f Hz in %d-sample buffer", velocity_low_cut_hz, counts.size)

    stats = AxisStats(
        accel_top_peak=accel_top.magnitude if accel_top is not None else 0.0,
        velocity_top_peak=velocity_top.magnitude if velocity_top is not None else 0.0,
        dominant_freq=velocity_top.frequency if velocity_top is not None else 0.0,
    )
    return AxisAnalysis(
        stats=stats,
        acceleration=accel_spectrum,
        velocity=velocity_spectrum,
        acceleration_peaks=accel_peaks,
        velocity_peaks=velocity_peaks,
        waveform=velocity_waveform_stats(accel_mm_s2, dt=config.acquisition_seconds / (counts.size - 1)),
    )


def velocity_waveform_stats(accel_mm_s2: npt.ArrayLike, *, dt: float) -> VelocityWaveformStats:
    """RMS, peak and peak-to-peak of the integrated velocity with its mean removed."""
    accel = np.asarray(accel_mm_s2, dtype=np.float64).reshape(-1)
    if accel.size == 0:
        return VelocityWaveformStats.zero()
    velocity = detrend(integrate_to_velocity(accel, dt), type="constant")
    return VelocityWaveformStats(
        rms=float(np.sqrt(np.mean(np.square(velocity)))),
        peak=float(np.max(np.abs(velocity))),
        peak_to_peak=float(np.max(velocity) - np.min(velocity)),
    )


def analyze_sensor(
    buffers: Mapping[Axis, npt.ArrayLike | None],
    config: AxisConfig,
    *,
    peak_count: int = DEFAULT_PEAK_COUNT,
    pad_to_pow2: bool = False,
    velocity_low_cut_hz: float = DEFAULT_VELOCITY_LOW_CUT_HZ,
) -> dict[Axis, AxisAnalysis]:
    """Analyze H/V/A buffers; axes without a buffer report no data."""
    results: dict[Axis, AxisAnalysis] = {}
    for axis in Axis:
        raw = buffers.get(axis)
        if raw is None:
            results[axis] = AxisAnalysis.no_data()
            continue
        results[axis] = analyze_axis(
            raw,
            config,
            peak_count=peak_count,
            pad_to_pow2=pad_to_pow2,
            velocity_low_cut_hz=velocity_low_cut_hz,
        )
    return results


def overall_vibration_stats(*axes: Sequence[float] | npt.ArrayLike) -> OverallVibrationStats:
    """RMS and max absolute value over the concatenation of all axis samples."""
    arrays = [np.asarray(axis, dtype=np.float64).reshape(-1) for axis in axes]
    combined = np.concatenate(arrays) if arrays else np.zeros(0, dtype=np.float64)
    combined = combined[np.isfinite(combined)]
    if combined.size == 0:
        return OverallVibrationStats(rms=0.0, peak=0.0)
    return OverallVibrationStats(
        rms=float(np.sqrt(np.mean(np.square(combined)))),
        peak=float(np.max(np.abs(combined))),
    )
