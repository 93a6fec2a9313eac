"""Threshold classification of a single measurement into a StatusLevel."""

from __future__ import annotations

import logging
from math import isfinite

from isovibe.domain.models import AxisStats, StatusLevel, ThresholdSet
from isovibe.thresholds.contracts import SystemDefaults


logger = logging.getLogger(__name__)

_DEFAULTS = SystemDefaults()


def _is_unusable(value: float, *, positive_only: bool) -> bool:
    return not isfinite(value) or (positive_only and value <= 0)


def guard_thresholds(
    thresholds: ThresholdSet,
    fallback: ThresholdSet = _DEFAULTS.velocity,
    *,
    positive_only: bool = True,
) -> ThresholdSet:
    """Replace unusable boundaries with the fallback's.

    Non-finite boundaries are always unusable. With `positive_only` (velocity)
    zero and negative boundaries are too, since they would put every
    ordinary reading above them. This guard runs before any comparison in
    `classify`.
    """
    values = thresholds.as_tuple()
    if not any(_is_unusable(value, positive_only=positive_only) for value in values):
        return thresholds
    if any(_is_unusable(value, positive_only=positive_only) for value in fallback.as_tuple()):
        qualifier = "finite and > 0" if positive_only else "finite"
        raise ValueError(f"fallback thresholds must be {qualifier}")

    repaired = tuple(
        default if _is_unusable(value, positive_only=positive_only) else value
        for value, default in zip(values, fallback.as_tuple())
    )
    logger.debug("replacing unusable thresholds %s with %s", values, repaired)
    return ThresholdSet.sorted_from(*repaired)


def classify(
    value: float,
    thresholds: ThresholdSet,
    *,
    fallback: ThresholdSet = _DEFAULTS.velocity,
    positive_only: bool = True,
) -> StatusLevel:
    """Band a reading; each escalation needs a strictly greater value."""
    if not isfinite(value):
        raise ValueError("value must be finite")

    effective = guard_thresholds(thresholds, fallback, positive_only=positive_only)
    if value > effective.max:
        return StatusLevel.CRITICAL
    if value > effective.medium:
        return StatusLevel.CONCERN
    if value > effective.min:
        return StatusLevel.WARNING
    return StatusLevel.NORMAL


def classify_axis(
    stats: AxisStats,
    thresholds: ThresholdSet,
    *,
    fallback: ThresholdSet = _DEFAULTS.velocity,
) -> StatusLevel | None:
    """Classify an axis by its velocity top peak; `None` when it has no data."""
    if not stats.has_data:
        return None
    return classify(stats.velocity_top_peak, thresholds, fallback=fallback)


def classify_temperature(
    value: float,
    thresholds: ThresholdSet,
    *,
    fallback: ThresholdSet = _DEFAULTS.temperature,
) -> StatusLevel:
    """Band a temperature in degrees C; sub-zero boundaries are kept as given."""
    return classify(value, thresholds, fallback=fallback, positive_only=False)
