"""Magnitude spectra of sensor sample buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import isfinite
from typing import cast

import numpy as np
import numpy.typing as npt

from isovibe.domain.models import SpectrumPoint


FloatArray = npt.NDArray[np.float64]

DEFAULT_VELOCITY_LOW_CUT_HZ = 2.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Spectrum:
    """One-sided (0..Nyquist) magnitude spectrum with its frequency bins."""

    magnitude: FloatArray
    frequency: FloatArray
    fft_length: int = 0

    def __post_init__(self) -> None:
        if self.magnitude.shape != self.frequency.shape:
            raise ValueError("magnitude and frequency must have the same shape")

    @classmethod
    def empty(cls) -> Spectrum:
        """Spectrum standing in for a buffer with no usable samples."""
        return cls(
            magnitude=np.zeros(0, dtype=np.float64),
            frequency=np.zeros(0, dtype=np.float64),
            fft_length=0,
        )

    @property
    def is_empty(self) -> bool:
        return self.magnitude.size == 0

    @property
    def bin_width_hz(self) -> float:
        if self.frequency.size < 2:
            return 0.0
        return float(self.frequency[1] - self.frequency[0])

    def points(self) -> tuple[SpectrumPoint, ...]:
        return tuple(
            SpectrumPoint(frequency=float(f), magnitude=float(m))
            for f, m in zip(self.frequency, self.magnitude)
        )


def compute_spectrum(
    samples: npt.ArrayLike,
    sample_rate_hz: float,
    *,
    pad_to_pow2: bool = False,
) -> Spectrum:
    """FFT magnitude spectrum normalised by FFT length, folded at Nyquist.

    No window is applied here. Empty buffers and buffers holding non-finite
    values produce an empty spectrum instead of raising.
    """
    if not isfinite(sample_rate_hz) or sample_rate_hz <= 0:
        raise ValueError("sample_rate_hz must be finite and > 0")

    x = np.asarray(samples, dtype=np.float64).reshape(-1)
    if x.size == 0:
        logger.debug("empty sample buffer; returning empty spectrum")
        return Spectrum.empty()
    if not np.all(np.isfinite(x)):
        logger.warning("sample buffer contains non-finite values; returning empty spectrum")
        return Spectrum.empty()

    n = _next_pow2(x.size) if pad_to_pow2 else x.size
    phasors = np.fft.fft(x, n=n)
    magnitude = np.abs(phasors) / n
    frequency = np.arange(n, dtype=np.float64) * sample_rate_hz / n

    half = n // 2
    return Spectrum(
        magnitude=cast(FloatArray, np.asarray(magnitude[:half], dtype=np.float64)),
        frequency=cast(FloatArray, frequency[:half]),
        fft_length=n,
    )


def integrate_spectrum(spectrum: Spectrum, *, low_cut_hz: float = 0.0) -> Spectrum:
    """Divide each bin by 2*pi*f to turn an acceleration spectrum into velocity.

    The DC bin has no defined velocity and is zeroed, as is every bin at or
    below `low_cut_hz` where 1/f would amplify leakage.
    """
    if not isfinite(low_cut_hz) or low_cut_hz < 0:
        raise ValueError("low_cut_hz must be finite and >= 0")
    if spectrum.is_empty:
        return spectrum

    omega = 2.0 * np.pi * spectrum.frequency
    velocity = np.zeros_like(spectrum.magnitude)
    nonzero = (omega > 0) & (spectrum.frequency > low_cut_hz)
    velocity[nonzero] = spectrum.magnitude[nonzero] / omega[nonzero]
    return Spectrum(magnitude=velocity, frequency=spectrum.frequency, fft_length=spectrum.fft_length)


def _next_pow2(size: int) -> int:
    n = 1
    while n < size:
        n <<= 1
    return n
