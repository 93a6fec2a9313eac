"""ISO 10816-3 catalog, threshold sources and layered resolution."""

from isovibe.thresholds.catalog import (
    ISO_10816_3_CLASSES,
    FoundationType,
    MachineClassInfo,
    all_machine_classes,
    get_machine_class,
    get_machine_class_by_code,
    machine_class_from_power,
)
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
from isovibe.thresholds.resolver import (
    OverrideMatch,
    ResolvedThreshold,
    ThresholdProvider,
    ThresholdSource,
    build_providers,
    resolve,
    resolve_axes,
    select_override,
)

__all__ = [
    "ISO_10816_3_CLASSES",
    "Boundary",
    "FoundationType",
    "MachineClassInfo",
    "OverrideMatch",
    "PartialThresholds",
    "ResolvedThreshold",
    "SensorThresholdContext",
    "SystemDefaults",
    "ThresholdOverride",
    "ThresholdProvider",
    "ThresholdSource",
    "all_machine_classes",
    "build_providers",
    "get_machine_class",
    "get_machine_class_by_code",
    "is_valid_uuid",
    "machine_class_from_power",
    "normalize_machine_name",
    "requires_positive",
    "resolve",
    "resolve_axes",
    "select_override",
]
