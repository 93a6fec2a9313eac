"""Axis classification and cross-axis/fleet aggregation."""

from isovibe.status.aggregate import FleetSummary, connectivity_from_last_seen, fleet_summary, sensor_status
from isovibe.status.classifier import classify, classify_axis, classify_temperature, guard_thresholds

__all__ = [
    "FleetSummary",
    "classify",
    "classify_axis",
    "classify_temperature",
    "connectivity_from_last_seen",
    "fleet_summary",
    "guard_thresholds",
    "sensor_status",
]
