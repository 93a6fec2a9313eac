"""Threshold source contracts consumed by the resolver."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from math import isfinite

from isovibe.domain.models import Axis, Quantity, ThresholdSet


_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class Boundary(StrEnum):
    """Individual boundary of a threshold set."""

    MIN = "min"
    MEDIUM = "medium"
    MAX = "max"


@dataclass(frozen=True, slots=True)
class PartialThresholds:
    """Zero or more threshold boundaries supplied by one source.

    A non-finite boundary always counts as not supplied. Zero and negative
    boundaries count as not supplied only when `positive_only` is set, which
    is the case for velocity; temperatures below freezing are legitimate.
    """

    min: float | None = None
    medium: float | None = None
    max: float | None = None

    def get(self, boundary: Boundary, *, positive_only: bool = True) -> float | None:
        value: float | None = getattr(self, boundary.value)
        if value is None or not isfinite(value):
            return None
        if positive_only and value <= 0:
            return None
        return value

    @property
    def is_empty(self) -> bool:
        return all(self.get(boundary) is None for boundary in Boundary)

    @classmethod
    def from_set(cls, thresholds: ThresholdSet) -> PartialThresholds:
        return cls(min=thresholds.min, medium=thresholds.medium, max=thresholds.max)


EMPTY_PARTIAL = PartialThresholds()


@dataclass(frozen=True, slots=True)
class ThresholdOverride:
    """Organization-level override scoped to one machine by id or name."""

    override_id: str | None = None
    machine_id: str | None = None
    machine_name: str | None = None
    machine_class: str | None = None
    velocity: PartialThresholds = EMPTY_PARTIAL
    temperature: PartialThresholds = EMPTY_PARTIAL
    axis_velocity: Mapping[Axis, PartialThresholds] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (self.machine_id or "").strip() and not (self.machine_name or "").strip():
            raise ValueError("override requires machine_id or machine_name")

    def partial_for(self, quantity: Quantity, axis: Axis | None = None) -> tuple[PartialThresholds, ...]:
        """Partials in lookup order: axis-specific first, then quantity-wide."""
        return _partials_for(self.velocity, self.temperature, self.axis_velocity, quantity, axis)


@dataclass(frozen=True, slots=True)
class SensorThresholdContext:
    """Machine identity and threshold fields carried on one sensor record."""

    machine_id: str | None = None
    machine_name: str | None = None
    machine_class: str | None = None
    velocity: PartialThresholds = EMPTY_PARTIAL
    temperature: PartialThresholds = EMPTY_PARTIAL
    axis_velocity: Mapping[Axis, PartialThresholds] = field(default_factory=dict)

    def partial_for(self, quantity: Quantity, axis: Axis | None = None) -> tuple[PartialThresholds, ...]:
        return _partials_for(self.velocity, self.temperature, self.axis_velocity, quantity, axis)


@dataclass(frozen=True, slots=True)
class SystemDefaults:
    """Last-resort thresholds when no other source supplies a boundary."""

    velocity: ThresholdSet = ThresholdSet(min=0.1, medium=0.125, max=0.15)
    temperature: ThresholdSet = ThresholdSet(min=35.0, medium=40.0, max=45.0)

    def __post_init__(self) -> None:
        if self.velocity.has_unusable_boundary:
            raise ValueError("velocity defaults must be finite and > 0")
        if not all(isfinite(value) for value in self.temperature.as_tuple()):
            raise ValueError("temperature defaults must be finite")

    def for_quantity(self, quantity: Quantity) -> ThresholdSet:
        if quantity == Quantity.VELOCITY:
            return self.velocity
        return self.temperature


def requires_positive(quantity: Quantity) -> bool:
    """Whether zero and negative boundaries of `quantity` count as missing."""
    return quantity == Quantity.VELOCITY


def is_valid_uuid(value: str | None) -> bool:
    """Whether `value` is a canonical 8-4-4-4-12 hex UUID string."""
    if value is None:
        return False
    return _UUID_PATTERN.match(value.strip()) is not None


def normalize_machine_name(name: str | None) -> str | None:
    """Case-insensitive, whitespace-trimmed key for machine name matching."""
    if name is None:
        return None
    normalized = " ".join(name.split()).casefold()
    return normalized or None


def _partials_for(
    velocity: PartialThresholds,
    temperature: PartialThresholds,
    axis_velocity: Mapping[Axis, PartialThresholds],
    quantity: Quantity,
    axis: Axis | None,
) -> tuple[PartialThresholds, ...]:
    if quantity == Quantity.TEMPERATURE:
        return (temperature,)
    if axis is not None and axis in axis_velocity:
        return (axis_velocity[axis], velocity)
    return (velocity,)
