"""Layered threshold resolution per quantity, axis and boundary.

Precedence is an ordered list of providers queried in turn for each
boundary independently:

1. override matched by machine id (UUID ids only)
2. override matched by normalized machine name
3. explicit fields on the sensor record
4. ISO 10816-3 class table (velocity only)
5. system defaults

Nothing is cached here; callers re-resolve on every classification.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from isovibe.domain.models import Axis, Quantity, ThresholdSet
from isovibe.thresholds.catalog import ISO_10816_3_CLASSES, MachineClassInfo, get_machine_class
from isovibe.thresholds.contracts import (
    Boundary,
    PartialThresholds,
    SensorThresholdContext,
    SystemDefaults,
    ThresholdOverride,
    is_valid_uuid,
    normalize_machine_name,
    requires_positive,
)


logger = logging.getLogger(__name__)


class ThresholdSource(StrEnum):
    """Provider that supplied a resolved boundary."""

    MACHINE_ID_OVERRIDE = "machine_id_override"
    MACHINE_NAME_OVERRIDE = "machine_name_override"
    SENSOR_FIELDS = "sensor_fields"
    MACHINE_CLASS = "machine_class"
    SYSTEM_DEFAULT = "system_default"


@dataclass(frozen=True, slots=True)
class ThresholdProvider:
    """One precedence layer with the partial sets it contributes, in lookup order."""

    source: ThresholdSource
    partials: tuple[PartialThresholds, ...]
    positive_only: bool = True

    def lookup(self, boundary: Boundary) -> float | None:
        for partial in self.partials:
            value = partial.get(boundary, positive_only=self.positive_only)
            if value is not None:
                return value
        return None


@dataclass(frozen=True, slots=True)
class OverrideMatch:
    """Override selected for a sensor and how it was matched."""

    override: ThresholdOverride
    source: ThresholdSource


@dataclass(frozen=True, slots=True)
class ResolvedThreshold:
    """Effective threshold set for one quantity/axis with per-boundary provenance."""

    quantity: Quantity
    axis: Axis | None
    thresholds: ThresholdSet
    sources: tuple[tuple[Boundary, ThresholdSource], ...]
    normalized: bool = False

    def source_of(self, boundary: Boundary) -> ThresholdSource:
        return dict(self.sources)[boundary]


def select_override(
    sensor: SensorThresholdContext,
    overrides: Sequence[ThresholdOverride],
) -> OverrideMatch | None:
    """Pick zero or one override: exact UUID machine id first, else machine name."""
    machine_id = (sensor.machine_id or "").strip()
    if machine_id and is_valid_uuid(machine_id):
        folded_id = machine_id.lower()
        for override in overrides:
            candidate = (override.machine_id or "").strip()
            if candidate and is_valid_uuid(candidate) and candidate.lower() == folded_id:
                return OverrideMatch(override=override, source=ThresholdSource.MACHINE_ID_OVERRIDE)
    elif machine_id:
        logger.debug("machine_id %r is not a UUID; falling back to machine name match", machine_id)

    name_key = normalize_machine_name(sensor.machine_name)
    if name_key is not None:
        for override in overrides:
            if normalize_machine_name(override.machine_name) == name_key:
                return OverrideMatch(override=override, source=ThresholdSource.MACHINE_NAME_OVERRIDE)
    return None


def build_providers(
    sensor: SensorThresholdContext,
    overrides: Sequence[ThresholdOverride],
    *,
    quantity: Quantity,
    axis: Axis | None = None,
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
    defaults: SystemDefaults = SystemDefaults(),
) -> tuple[ThresholdProvider, ...]:
    """Ordered providers for one quantity/axis, highest precedence first."""
    providers: list[ThresholdProvider] = []
    positive_only = requires_positive(quantity)

    match = select_override(sensor, overrides)
    if match is not None:
        providers.append(
            ThresholdProvider(
                source=match.source,
                partials=match.override.partial_for(quantity, axis),
                positive_only=positive_only,
            )
        )

    providers.append(
        ThresholdProvider(
            source=ThresholdSource.SENSOR_FIELDS,
            partials=sensor.partial_for(quantity, axis),
            positive_only=positive_only,
        )
    )

    if quantity == Quantity.VELOCITY:
        class_id = sensor.machine_class
        if match is not None and (match.override.machine_class or "").strip():
            class_id = match.override.machine_class
        class_info = get_machine_class(class_id, class_table)
        if class_info is not None:
            providers.append(
                ThresholdProvider(
                    source=ThresholdSource.MACHINE_CLASS,
                    partials=(PartialThresholds.from_set(class_info.thresholds),),
                )
            )
        elif class_id:
            logger.debug("unknown machine class %r; skipping class table", class_id)

    providers.append(
        ThresholdProvider(
            source=ThresholdSource.SYSTEM_DEFAULT,
            partials=(PartialThresholds.from_set(defaults.for_quantity(quantity)),),
            positive_only=positive_only,
        )
    )
    return tuple(providers)


def resolve(
    sensor: SensorThresholdContext,
    overrides: Sequence[ThresholdOverride] = (),
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
    *,
    quantity: Quantity = Quantity.VELOCITY,
    axis: Axis | None = None,
    defaults: SystemDefaults = SystemDefaults(),
) -> ResolvedThreshold:
    """Merge every provider boundary by boundary into one effective set."""
    providers = build_providers(
        sensor,
        overrides,
        quantity=quantity,
        axis=axis,
        class_table=class_table,
        defaults=defaults,
    )

    picked: list[tuple[Boundary, float, ThresholdSource]] = []
    for boundary in Boundary:
        for provider in providers:
            value = provider.lookup(boundary)
            if value is not None:
                picked.append((boundary, value, provider.source))
                break
        else:
            raise RuntimeError(f"no provider supplied {boundary.value}; system defaults are incomplete")

    values = [value for _, value, _ in picked]
    normalized = values != sorted(values)
    if normalized:
        logger.warning(
            "merged %s thresholds are not ascending (%s); normalizing by sorting",
            quantity.value,
            ", ".join(f"{b.value}={v} from {s.value}" for b, v, s in picked),
        )
        ranked = sorted(picked, key=lambda item: item[1])
        picked = [(boundary, value, source) for boundary, (_, value, source) in zip(Boundary, ranked)]

    by_boundary = {boundary: value for boundary, value, _ in picked}
    return ResolvedThreshold(
        quantity=quantity,
        axis=axis,
        thresholds=ThresholdSet(
            min=by_boundary[Boundary.MIN],
            medium=by_boundary[Boundary.MEDIUM],
            max=by_boundary[Boundary.MAX],
        ),
        sources=tuple((boundary, source) for boundary, _, source in picked),
        normalized=normalized,
    )


def resolve_axes(
    sensor: SensorThresholdContext,
    overrides: Sequence[ThresholdOverride] = (),
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
    *,
    defaults: SystemDefaults = SystemDefaults(),
) -> dict[Axis, ResolvedThreshold]:
    """Velocity thresholds for each of the H/V/A axes."""
    return {
        axis: resolve(
            sensor,
            overrides,
            class_table,
            quantity=Quantity.VELOCITY,
            axis=axis,
            defaults=defaults,
        )
        for axis in Axis
    }
