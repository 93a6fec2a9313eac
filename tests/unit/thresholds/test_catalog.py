"""Tests for the ISO 10816-3 machine class catalog."""

from __future__ import annotations

import pytest

from isovibe.domain import ThresholdSet
from isovibe.thresholds import (
    ISO_10816_3_CLASSES,
    FoundationType,
    all_machine_classes,
    get_machine_class,
    get_machine_class_by_code,
    machine_class_from_power,
)


def test_catalog_has_nine_classes_in_code_order() -> None:
    classes = all_machine_classes()

    assert len(ISO_10816_3_CLASSES) == 9
    assert [info.code for info in classes] == list(range(1, 10))


@pytest.mark.parametrize(
    ("class_id", "expected"),
    [
        ("smallMachine", (0.71, 1.80, 4.50)),
        ("mediumRigid", (1.40, 2.80, 4.50)),
        ("mediumFlexible", (2.30, 4.50, 7.10)),
        ("largeRigid", (2.30, 4.50, 7.10)),
        ("largeFlexible", (3.50, 7.10, 11.0)),
        ("integratedRigid", (1.40, 2.80, 4.50)),
        ("integratedFlexible", (2.30, 4.50, 7.10)),
        ("externalRigid", (2.30, 4.50, 7.10)),
        ("externalFlexible", (3.50, 7.10, 11.0)),
    ],
)
def test_class_velocity_thresholds(class_id: str, expected: tuple[float, float, float]) -> None:
    info = get_machine_class(class_id)

    assert info is not None
    assert info.thresholds == ThresholdSet(*expected)


def test_lookup_ignores_case_and_whitespace() -> None:
    info = get_machine_class("  MEDIUMFLEXIBLE ")

    assert info is not None
    assert info.id == "mediumFlexible"
    assert get_machine_class("unknownClass") is None
    assert get_machine_class(None) is None


def test_lookup_by_code() -> None:
    info = get_machine_class_by_code(5)

    assert info is not None
    assert info.id == "largeFlexible"
    assert get_machine_class_by_code(42) is None


def test_machine_class_from_power_and_foundation() -> None:
    assert machine_class_from_power(7.5, FoundationType.RIGID) == "smallMachine"
    assert machine_class_from_power(15.0, "rigid") == "mediumRigid"
    assert machine_class_from_power(75.0, "flexible") == "mediumFlexible"
    assert machine_class_from_power(90.0, FoundationType.RIGID) == "largeRigid"
    assert machine_class_from_power(300.0, "flexible") == "largeFlexible"


def test_machine_class_from_power_rejects_unknown_foundation() -> None:
    with pytest.raises(ValueError):
        machine_class_from_power(30.0, "floating")
