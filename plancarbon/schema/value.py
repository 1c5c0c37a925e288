# plancarbon/schema/value.py
"""
Unit-tagged values and the unit tables used to normalize them.

Memory is canonical in megabytes (int), storage in gigabytes (Decimal).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from plancarbon.errors import ConfigurationError, MalformedPlanError

__all__ = [
    "ValueWithUnit",
    "MEMORY_UNITS_TO_MB",
    "STORAGE_UNITS_TO_GB",
    "to_decimal",
    "parse_int",
    "memory_to_mb",
    "storage_to_gb",
]

_KIB = Decimal(1024)

MEMORY_UNITS_TO_MB = {
    "b": 1 / (_KIB * _KIB),
    "kb": 1 / _KIB,
    "mb": Decimal(1),
    "gb": _KIB,
    "tb": _KIB * _KIB,
    "pb": _KIB * _KIB * _KIB,
}

STORAGE_UNITS_TO_GB = {
    "b": 1 / (_KIB * _KIB * _KIB),
    "kb": 1 / (_KIB * _KIB),
    "mb": 1 / _KIB,
    "gb": Decimal(1),
    "tb": _KIB,
}

# "2 GB", "2048mb", "1.5 TiB"
_VALUE_WITH_UNIT_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-zA-Z]+)\s*$")


def _unit_key(unit: str) -> str:
    u = unit.strip().lower()
    # binary prefixes are what the tables mean anyway
    if len(u) == 3 and u.endswith("ib"):
        u = u[0] + "b"
    return u


@dataclass(frozen=True)
class ValueWithUnit:
    value: Any
    unit: Optional[str] = None

    @classmethod
    def parse(cls, raw: Any, default_unit: Optional[str] = None) -> "ValueWithUnit":
        """A string carrying its own unit wins over the unit given by the mapping."""
        if isinstance(raw, str):
            m = _VALUE_WITH_UNIT_RE.match(raw)
            if m:
                return cls(value=m.group(1), unit=m.group(2))
        return cls(value=raw, unit=default_unit)


def to_decimal(val: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    if isinstance(val, Decimal):
        return val
    if val is None or isinstance(val, bool):
        return default
    try:
        return Decimal(str(val))
    except (InvalidOperation, ValueError, TypeError):
        return default


def parse_int(val: Any, what: str = "value") -> int:
    d = to_decimal(val)
    if d is None:
        raise MalformedPlanError(f"cannot parse {what} {val!r} as a number")
    return int(d)


def memory_to_mb(value: ValueWithUnit) -> int:
    unit = _unit_key(value.unit or "mb")
    factor = MEMORY_UNITS_TO_MB.get(unit)
    if factor is None:
        raise ConfigurationError(f"Unknown unit for memory: {value.unit}")
    amount = to_decimal(value.value)
    if amount is None:
        raise MalformedPlanError(f"cannot parse memory {value.value!r} as a number")
    return int(amount * factor)


def storage_to_gb(value: ValueWithUnit) -> Decimal:
    unit = _unit_key(value.unit or "gb")
    factor = STORAGE_UNITS_TO_GB.get(unit)
    if factor is None:
        raise ConfigurationError(f"Unknown unit for storage: {value.unit}")
    amount = to_decimal(value.value)
    if amount is None:
        raise MalformedPlanError(f"cannot parse storage size {value.value!r} as a number")
    return amount * factor
