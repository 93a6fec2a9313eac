"""Integration adapters for dashboard backend payloads."""

from isovibe.integration.payloads import (
    PayloadError,
    ThresholdBundle,
    parse_axis_config,
    parse_sensor_context,
    parse_sensor_reading,
    parse_threshold_bundle,
    parse_threshold_override,
)

__all__ = [
    "PayloadError",
    "ThresholdBundle",
    "parse_axis_config",
    "parse_sensor_context",
    "parse_sensor_reading",
    "parse_threshold_bundle",
    "parse_threshold_override",
]
