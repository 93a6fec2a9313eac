"""Conversions from raw ADC counts to physical acceleration and velocity."""

from __future__ import annotations

from typing import overload

import numpy as np
import numpy.typing as npt


FloatArray = npt.NDArray[np.float64]

ADC_RESOLUTION = 4096
STANDARD_GRAVITY = 9.80665


@overload
def to_acceleration_g(adc: float, g_scale: float) -> float: ...


@overload
def to_acceleration_g(adc: npt.ArrayLike, g_scale: float) -> FloatArray: ...


def to_acceleration_g(adc: npt.ArrayLike, g_scale: float) -> float | FloatArray:
    """Convert 12-bit ADC counts into acceleration in g."""
    if np.isscalar(adc):
        return (float(adc) / ADC_RESOLUTION) * g_scale  # type: ignore[arg-type]
    counts = np.asarray(adc, dtype=np.float64)
    return (counts / ADC_RESOLUTION) * g_scale


@overload
def g_to_si(g: float) -> float: ...


@overload
def g_to_si(g: npt.ArrayLike) -> FloatArray: ...


def g_to_si(g: npt.ArrayLike) -> float | FloatArray:
    """Convert acceleration in g into mm/s^2."""
    if np.isscalar(g):
        return float(g) * STANDARD_GRAVITY * 1000.0  # type: ignore[arg-type]
    return np.asarray(g, dtype=np.float64) * STANDARD_GRAVITY * 1000.0


def integrate_to_velocity(accel: npt.ArrayLike, dt: float) -> FloatArray:
    """Running Euler integration: v[i] = v[i-1] + a[i] * dt with v[-1] = 0."""
    x = np.asarray(accel, dtype=np.float64).reshape(-1)
    if x.size == 0:
        return np.zeros(0, dtype=np.float64)
    return np.cumsum(x * dt)
