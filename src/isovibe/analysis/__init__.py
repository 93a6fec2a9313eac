"""Per-axis analysis pipeline."""

from isovibe.analysis.axis import (
    AxisAnalysis,
    OverallVibrationStats,
    analyze_axis,
    analyze_sensor,
    overall_vibration_stats,
    velocity_waveform_stats,
)

__all__ = [
    "AxisAnalysis",
    "OverallVibrationStats",
    "analyze_axis",
    "analyze_sensor",
    "overall_vibration_stats",
    "velocity_waveform_stats",
]
