# plancarbon/schema/catalog.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from plancarbon.data import load_json_data
from plancarbon.errors import ConfigurationError
from plancarbon.schema.value import to_decimal

__all__ = ["MachineType", "SqlTier", "Catalogs", "parse_catalogs", "load_catalogs"]

log = logging.getLogger(__name__)

GCP_MACHINE_TYPES_FILE = "gcp_machine_types.json"
GCP_SQL_TIERS_FILE = "gcp_sql_tiers.json"
AWS_INSTANCE_TYPES_FILE = "aws_instance_types.json"

# custom-4-8192, n2-custom-8-16384, n2d-custom-2-4096-ext
_GCP_CUSTOM_RE = re.compile(r"^(?:[a-z0-9]+-)?custom-(\d+)-(\d+)(?:-ext)?$")
_GCP_SQL_CUSTOM_RE = re.compile(r"^db-custom-(\d+)-(\d+)$")


@dataclass(frozen=True)
class MachineType:
    name: str
    vcpus: int
    memory_mb: int
    gpu_types: Tuple[str, ...] = ()
    cpu_type: str = ""
    instance_storage_gb: Decimal = Decimal(0)
    instance_storage_ssd: bool = True
    # zones or regions offering the type, empty when offered everywhere
    zones: Tuple[str, ...] = ()

    def offered_in(self, zone: Optional[str]) -> bool:
        if not zone or not self.zones:
            return True
        return any(zone == z or zone.startswith(z + "-") for z in self.zones)


@dataclass(frozen=True)
class SqlTier:
    name: str
    vcpus: int
    memory_mb: int


def _machine_type(name: str, raw: Dict[str, Any], source: str) -> MachineType:
    if not isinstance(raw, dict) or "vcpus" not in raw or "memory_mb" not in raw:
        raise ConfigurationError(f"{source}: entry {name!r} needs vcpus and memory_mb")
    storage = raw.get("instance_storage") or {}
    zones = raw.get("zones") or ()
    if not isinstance(zones, list):
        raise ConfigurationError(f"{source}: zones of {name!r} must be a list")
    return MachineType(
        name=name,
        vcpus=int(raw["vcpus"]),
        memory_mb=int(raw["memory_mb"]),
        gpu_types=tuple(raw.get("gpu_types") or ()),
        cpu_type=str(raw.get("cpu_type") or ""),
        instance_storage_gb=to_decimal(storage.get("size_gb"), Decimal(0)),
        instance_storage_ssd=bool(storage.get("ssd", True)),
        zones=tuple(str(z) for z in zones),
    )


@dataclass(frozen=True)
class Catalogs:
    gcp_machine_types: Dict[str, MachineType] = field(default_factory=dict)
    gcp_sql_tiers: Dict[str, SqlTier] = field(default_factory=dict)
    aws_instance_types: Dict[str, MachineType] = field(default_factory=dict)

    def gcp_machine_type(self, name: str, zone: Optional[str] = None) -> MachineType:
        # "zones/europe-west1-b/machineTypes/n1-standard-1" style links
        short = (name or "").rsplit("/", 1)[-1]
        m = _GCP_CUSTOM_RE.match(short)
        if m:
            return MachineType(name=short, vcpus=int(m.group(1)), memory_mb=int(m.group(2)))
        mt = self.gcp_machine_types.get(short)
        if mt is None:
            raise ConfigurationError(f"unknown GCP machine type {name!r} (zone {zone or '?'})")
        if not mt.offered_in(zone):
            raise ConfigurationError(f"GCP machine type {short!r} is not offered in zone {zone}")
        return mt

    def gcp_sql_tier(self, name: str) -> SqlTier:
        m = _GCP_SQL_CUSTOM_RE.match(name or "")
        if m:
            return SqlTier(name=name, vcpus=int(m.group(1)), memory_mb=int(m.group(2)))
        tier = self.gcp_sql_tiers.get(name)
        if tier is None:
            raise ConfigurationError(f"unknown GCP SQL tier {name!r}")
        return tier

    def aws_instance_type(self, name: str) -> MachineType:
        mt = self.aws_instance_types.get(name)
        if mt is None:
            raise ConfigurationError(f"unknown AWS instance type {name!r}")
        return mt


def parse_catalogs(
    gcp_machine_types: Dict[str, Any],
    gcp_sql_tiers: Dict[str, Any],
    aws_instance_types: Dict[str, Any],
) -> Catalogs:
    tiers = {}
    for name, raw in (gcp_sql_tiers or {}).items():
        if not isinstance(raw, dict) or "vcpus" not in raw or "memory_mb" not in raw:
            raise ConfigurationError(f"{GCP_SQL_TIERS_FILE}: entry {name!r} needs vcpus and memory_mb")
        tiers[name] = SqlTier(name=name, vcpus=int(raw["vcpus"]), memory_mb=int(raw["memory_mb"]))
    return Catalogs(
        gcp_machine_types={
            k: _machine_type(k, v, GCP_MACHINE_TYPES_FILE) for k, v in (gcp_machine_types or {}).items()
        },
        gcp_sql_tiers=tiers,
        aws_instance_types={
            k: _machine_type(k, v, AWS_INSTANCE_TYPES_FILE) for k, v in (aws_instance_types or {}).items()
        },
    )


@lru_cache(maxsize=None)
def load_catalogs(data_path: Optional[str] = None) -> Catalogs:
    catalogs = parse_catalogs(
        load_json_data(GCP_MACHINE_TYPES_FILE, data_path),
        load_json_data(GCP_SQL_TIERS_FILE, data_path),
        load_json_data(AWS_INSTANCE_TYPES_FILE, data_path),
    )
    log.debug(
        "Loaded catalogs: %d GCP machine types, %d GCP SQL tiers, %d AWS instance types",
        len(catalogs.gcp_machine_types),
        len(catalogs.gcp_sql_tiers),
        len(catalogs.aws_instance_types),
    )
    return catalogs
