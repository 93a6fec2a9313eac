"""Local-maximum peak extraction over magnitude spectra."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from isovibe.domain.models import PeakStat


BoolArray = npt.NDArray[np.bool_]

DEFAULT_PEAK_COUNT = 5


@dataclass(frozen=True, slots=True)
class PeakSearchResult:
    """Top peaks in descending magnitude plus a per-bin highlight mask.

    `total_found` counts every local maximum before the top-N cut.
    """

    peaks: tuple[PeakStat, ...]
    highlight_mask: BoolArray
    total_found: int = 0

    @property
    def top(self) -> PeakStat | None:
        return self.peaks[0] if self.peaks else None


def find_top_peaks(
    magnitude: npt.ArrayLike,
    frequency: npt.ArrayLike,
    count: int = DEFAULT_PEAK_COUNT,
) -> PeakSearchResult:
    """Return the `count` largest strict local maxima of `magnitude`.

    Ties in magnitude keep ascending index order. The highlight mask marks
    every bin whose magnitude equals one of the retained peak magnitudes.
    """
    mags = np.asarray(magnitude, dtype=np.float64).reshape(-1)
    freqs = np.asarray(frequency, dtype=np.float64).reshape(-1)
    if mags.shape != freqs.shape:
        raise ValueError("magnitude and frequency must have the same length")

    if mags.size < 3 or count <= 0:
        return PeakSearchResult(peaks=(), highlight_mask=np.zeros(mags.size, dtype=np.bool_))

    inner = mags[1:-1]
    is_peak = (inner > mags[:-2]) & (inner > mags[2:])
    candidates = np.flatnonzero(is_peak) + 1

    # stable sort on negated magnitude keeps first occurrence first among ties
    order = np.argsort(-mags[candidates], kind="stable")
    kept = candidates[order][:count]

    peaks = tuple(PeakStat.from_peak(float(freqs[i]), float(mags[i])) for i in kept)
    highlight_mask = np.isin(mags, mags[kept])
    return PeakSearchResult(
        peaks=peaks,
        highlight_mask=np.asarray(highlight_mask, dtype=np.bool_),
        total_found=int(candidates.size),
    )
