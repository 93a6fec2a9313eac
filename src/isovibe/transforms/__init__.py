"""Signal transforms: unit conversion, windowing, spectra and peak search."""

from isovibe.transforms.frequency import (
    DEFAULT_VELOCITY_LOW_CUT_HZ,
    Spectrum,
    compute_spectrum,
    integrate_spectrum,
)
from isovibe.transforms.peaks import DEFAULT_PEAK_COUNT, PeakSearchResult, find_top_peaks
from isovibe.transforms.units import (
    ADC_RESOLUTION,
    STANDARD_GRAVITY,
    g_to_si,
    integrate_to_velocity,
    to_acceleration_g,
)
from isovibe.transforms.windowing import apply_hann, hann_window

__all__ = [
    "ADC_RESOLUTION",
    "DEFAULT_PEAK_COUNT",
    "DEFAULT_VELOCITY_LOW_CUT_HZ",
    "STANDARD_GRAVITY",
    "PeakSearchResult",
    "Spectrum",
    "apply_hann",
    "compute_spectrum",
    "find_top_peaks",
    "g_to_si",
    "hann_window",
    "integrate_spectrum",
    "integrate_to_velocity",
    "to_acceleration_g",
]
