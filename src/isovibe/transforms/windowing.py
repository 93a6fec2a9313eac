"""Window functions applied to sample buffers before spectral analysis."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from scipy.signal import get_window


FloatArray = npt.NDArray[np.float64]


def hann_window(size: int) -> FloatArray:
    """Symmetric Hann window: w[i] = 0.5 * (1 - cos(2*pi*i / (size - 1)))."""
    if size < 0:
        raise ValueError("size must be >= 0")
    if size == 0:
        return np.zeros(0, dtype=np.float64)
    if size == 1:
        return np.ones(1, dtype=np.float64)
    return np.asarray(get_window("hann", size, fftbins=False), dtype=np.float64)


def apply_hann(samples: npt.ArrayLike) -> FloatArray:
    """Taper a 1D buffer with a Hann window of matching length."""
    x = np.asarray(samples, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("samples must be 1D")
    return x * hann_window(x.size)
