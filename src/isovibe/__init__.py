"""Vibration signal analysis and machine condition classification."""

__version__ = "0.1.0"
