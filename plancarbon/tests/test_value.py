from __future__ import annotations

from decimal import Decimal

import pytest

from plancarbon.errors import ConfigurationError, MalformedPlanError
from plancarbon.schema.value import (
    ValueWithUnit,
    memory_to_mb,
    parse_int,
    storage_to_gb,
    to_decimal,
)


def test_string_with_unit_wins_over_mapping_unit():
    v = ValueWithUnit.parse("2 GB", "mb")
    assert v == ValueWithUnit("2", "GB")
    assert ValueWithUnit.parse(2048, "mb") == ValueWithUnit(2048, "mb")
    assert ValueWithUnit.parse("n1-standard-1", "gb") == ValueWithUnit("n1-standard-1", "gb")


def test_unit_equivalent_memory_values_are_equal():
    assert memory_to_mb(ValueWithUnit.parse(2048, "mb")) == memory_to_mb(ValueWithUnit.parse("2 GB", "mb")) == 2048
    assert memory_to_mb(ValueWithUnit.parse("2GiB")) == 2048


@pytest.mark.parametrize(
    "value, unit, expected",
    [
        (1024 * 1024, "b", 1),
        (2048, "kb", 2),
        (512, "mb", 512),
        (None, None, None),
        (1.5, "gb", 1536),
        (1, "tb", 1024 * 1024),
        (1, "pb", 1024 * 1024 * 1024),
    ],
)
def test_memory_units(value, unit, expected):
    if value is None:
        # no unit means megabytes
        assert memory_to_mb(ValueWithUnit(300)) == 300
        return
    assert memory_to_mb(ValueWithUnit(value, unit)) == expected


@pytest.mark.parametrize(
    "value, unit, expected",
    [
        (1024 ** 3, "b", Decimal(1)),
        (1024 ** 2, "kb", Decimal(1)),
        (512, "mb", Decimal("0.5")),
        (100, "gb", Decimal(100)),
        (2, "tb", Decimal(2048)),
    ],
)
def test_storage_units(value, unit, expected):
    assert storage_to_gb(ValueWithUnit(value, unit)) == expected


def test_unknown_units_are_configuration_errors():
    with pytest.raises(ConfigurationError):
        memory_to_mb(ValueWithUnit(1, "furlongs"))
    with pytest.raises(ConfigurationError):
        storage_to_gb(ValueWithUnit(1, "pb"))


def test_non_numeric_values_are_malformed():
    with pytest.raises(MalformedPlanError):
        memory_to_mb(ValueWithUnit("lots", "gb"))
    with pytest.raises(MalformedPlanError):
        storage_to_gb(ValueWithUnit("big", "gb"))
    with pytest.raises(MalformedPlanError):
        parse_int("three")


def test_to_decimal_and_parse_int():
    assert to_decimal("10.5") == Decimal("10.5")
    assert to_decimal(None, Decimal(8)) == Decimal(8)
    assert to_decimal(True, Decimal(0)) == Decimal(0)
    assert to_decimal("x") is None
    assert parse_int(3.0) == 3
    assert parse_int("4") == 4
