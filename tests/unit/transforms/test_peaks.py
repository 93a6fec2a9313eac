"""Tests for top-N local peak extraction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from isovibe.transforms import compute_spectrum, find_top_peaks


def test_top_peaks_sorted_by_magnitude_with_index_tiebreak() -> None:
    magnitude = [0.0, 3.0, 1.0, 5.0, 2.0, 5.0, 0.0]
    frequency = [0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    result = find_top_peaks(magnitude, frequency, 3)

    assert [peak.frequency for peak in result.peaks] == [3.0, 5.0, 1.0]
    assert [peak.magnitude for peak in result.peaks] == [5.0, 5.0, 3.0]
    assert result.peaks[0].rms == pytest.approx(5.0 / math.sqrt(2.0))


def test_count_limits_retained_peaks_and_mask() -> None:
    magnitude = [0.0, 3.0, 1.0, 5.0, 2.0, 4.0, 0.0]
    frequency = list(range(7))

    result = find_top_peaks(magnitude, frequency, 2)

    assert [peak.magnitude for peak in result.peaks] == [5.0, 4.0]
    assert result.highlight_mask.tolist() == [False, False, False, True, False, True, False]
    assert result.total_found == 3


def test_plateaus_are_not_peaks_but_equal_bins_are_highlighted() -> None:
    magnitude = [0.0, 2.0, 1.0, 2.0, 2.0, 0.0]
    frequency = list(range(6))

    result = find_top_peaks(magnitude, frequency, 5)

    assert [peak.frequency for peak in result.peaks] == [1.0]
    assert result.highlight_mask.tolist() == [False, True, False, True, True, False]


def test_edges_are_never_peaks() -> None:
    result = find_top_peaks([9.0, 1.0, 9.0], [0.0, 1.0, 2.0], 5)
    assert result.peaks == ()


def test_fewer_than_three_bins_yield_no_peaks() -> None:
    result = find_top_peaks([1.0, 2.0], [0.0, 1.0], 5)

    assert result.peaks == ()
    assert result.top is None
    assert result.highlight_mask.tolist() == [False, False]


def test_mismatched_lengths_are_rejected() -> None:
    with pytest.raises(ValueError, match="same length"):
        find_top_peaks([1.0, 2.0, 1.0], [0.0, 1.0], 1)


def test_sinusoid_peak_within_one_bin_of_source_frequency() -> None:
    sampling_hz = 400.0
    f0 = 37.3
    t = np.arange(1024) / sampling_hz
    spectrum = compute_spectrum(np.sin(2.0 * np.pi * f0 * t), sample_rate_hz=sampling_hz)

    result = find_top_peaks(spectrum.magnitude, spectrum.frequency, 5)

    assert result.top is not None
    assert abs(result.top.frequency - f0) <= spectrum.bin_width_hz
