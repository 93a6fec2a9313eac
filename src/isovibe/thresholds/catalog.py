"""ISO 10816-3 machine classes and their velocity thresholds (mm/s)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from isovibe.domain.models import ThresholdSet


class FoundationType(StrEnum):
    """Machine mounting stiffness used by ISO 10816-3 grouping."""

    RIGID = "rigid"
    FLEXIBLE = "flexible"


@dataclass(frozen=True, slots=True)
class MachineClassInfo:
    """Immutable catalog entry for one ISO 10816-3 machine class."""

    id: str
    code: int
    name: str
    description: str
    thresholds: ThresholdSet


def _entry(class_id: str, code: int, name: str, low: float, mid: float, high: float) -> MachineClassInfo:
    return MachineClassInfo(
        id=class_id,
        code=code,
        name=name,
        description=f"G < {low:.2f} mm/s < Y < {mid:.2f} mm/s < O < {high:.2f} mm/s < R",
        thresholds=ThresholdSet(min=low, medium=mid, max=high),
    )


ISO_10816_3_CLASSES: Mapping[str, MachineClassInfo] = MappingProxyType(
    {
        info.id: info
        for info in (
            _entry("smallMachine", 1, "Small machine", 0.71, 1.80, 4.50),
            _entry("mediumRigid", 2, "Medium machine rigid", 1.40, 2.80, 4.50),
            _entry("mediumFlexible", 3, "Medium machine flexible", 2.30, 4.50, 7.10),
            _entry("largeRigid", 4, "Large machine rigid", 2.30, 4.50, 7.10),
            _entry("largeFlexible", 5, "Large machine flexible", 3.50, 7.10, 11.0),
            _entry("integratedRigid", 6, "Integrated driver motor pump rigid", 1.40, 2.80, 4.50),
            _entry("integratedFlexible", 7, "Integrated driver motor pump flexible", 2.30, 4.50, 7.10),
            _entry("externalRigid", 8, "External driver motor pump rigid", 2.30, 4.50, 7.10),
            _entry("externalFlexible", 9, "External driver motor pump flexible", 3.50, 7.10, 11.0),
        )
    }
)

_BY_FOLDED_ID: dict[str, MachineClassInfo] = {key.casefold(): info for key, info in ISO_10816_3_CLASSES.items()}
_BY_CODE: dict[int, MachineClassInfo] = {info.code: info for info in ISO_10816_3_CLASSES.values()}


def get_machine_class(
    class_id: str | None,
    class_table: Mapping[str, MachineClassInfo] = ISO_10816_3_CLASSES,
) -> MachineClassInfo | None:
    """Look up a class by id, ignoring case and surrounding whitespace."""
    if class_id is None:
        return None
    key = class_id.strip()
    if not key:
        return None
    if key in class_table:
        return class_table[key]
    if class_table is ISO_10816_3_CLASSES:
        return _BY_FOLDED_ID.get(key.casefold())
    folded = key.casefold()
    for candidate_id, info in class_table.items():
        if candidate_id.casefold() == folded:
            return info
    return None


def get_machine_class_by_code(code: int) -> MachineClassInfo | None:
    return _BY_CODE.get(code)


def all_machine_classes() -> tuple[MachineClassInfo, ...]:
    """All catalog entries ordered by class code."""
    return tuple(sorted(ISO_10816_3_CLASSES.values(), key=lambda info: info.code))


def machine_class_from_power(power_kw: float, foundation: FoundationType | str) -> str:
    """Pick the ISO 10816-3 group from rated power and foundation stiffness."""
    if power_kw < 0:
        raise ValueError("power_kw must be >= 0")
    rigid = FoundationType(foundation) == FoundationType.RIGID
    if power_kw < 15:
        return "smallMachine"
    if power_kw <= 75:
        return "mediumRigid" if rigid else "mediumFlexible"
    return "largeRigid" if rigid else "largeFlexible"
