"""Tests for ADC, acceleration and velocity conversions."""

from __future__ import annotations

import numpy as np
import pytest

from isovibe.transforms import (
    ADC_RESOLUTION,
    STANDARD_GRAVITY,
    g_to_si,
    integrate_to_velocity,
    to_acceleration_g,
)


def test_full_scale_adc_maps_to_g_scale() -> None:
    assert to_acceleration_g(ADC_RESOLUTION, 16.0) == pytest.approx(16.0)
    assert to_acceleration_g(-2048, 8.0) == pytest.approx(-4.0)


def test_acceleration_is_linear_in_g_scale() -> None:
    adc = np.asarray([-4095, -17, 0, 1, 256, 3000], dtype=np.int64)

    single = to_acceleration_g(adc, 4.0)
    doubled = to_acceleration_g(adc, 8.0)

    assert np.allclose(doubled, 2.0 * single)


def test_g_to_si_uses_standard_gravity_in_mm_per_s2() -> None:
    assert g_to_si(1.0) == pytest.approx(STANDARD_GRAVITY * 1000.0)
    assert np.allclose(g_to_si([0.0, 0.5]), [0.0, 4903.325])


def test_integrate_to_velocity_is_running_euler_sum() -> None:
    velocity = integrate_to_velocity([1.0, 2.0, -1.0, 0.5], dt=0.1)
    assert np.allclose(velocity, [0.1, 0.3, 0.2, 0.25])


def test_integrate_to_velocity_empty_input() -> None:
    assert integrate_to_velocity([], dt=0.01).size == 0
