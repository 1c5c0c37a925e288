# plancarbon/providers/terraform/gcp/disk.py
"""
Persistent disks, wherever they are declared: boot_disk.initialize_params of an
instance, disk blocks of an instance template, google_compute_(region_)disk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from plancarbon.schema.value import to_decimal

from ..context import PlanScope
from ..plan import Block
from .base import _last_segment

log = logging.getLogger(__name__)

# https://cloud.google.com/compute/docs/disks#localssds
SCRATCH_DISK_SIZE_GB = Decimal(375)

HDD_DISK_TYPES = ("pd-standard",)


@dataclass(frozen=True)
class Disk:
    size_gb: Decimal
    is_ssd: bool = True
    replication_factor: int = 1


def _disk_type(block: Block, is_boot: bool, scope: PlanScope) -> str:
    # instances say "type", templates say "disk_type"
    disk_type = block.value("type") or block.value("disk_type")
    if not disk_type:
        cfg = scope.config
        return cfg.gcp_boot_disk_type if is_boot else cfg.gcp_disk_type
    return _last_segment(disk_type)


def _disk_size(resource_address: str, block: Block, is_boot: bool, scope: PlanScope) -> Decimal:
    declared = to_decimal(block.value("size"))
    if declared is None:
        declared = to_decimal(block.value("disk_size_gb"))
    if declared is not None:
        return declared

    cfg = scope.config
    default = cfg.gcp_boot_disk_size_gb if is_boot else cfg.gcp_disk_size_gb
    image_refs = block.references("image") + block.references("source_image")
    if image_refs or block.has("image") or block.has("source_image"):
        return scope.references.image_size_gb(resource_address, image_refs, default)
    log.warning(
        "%s : Disk size not declared. Please set it! (otherwise we assume %sGb)", resource_address, default
    )
    return default


def read_disk(resource_address: str, block: Block, is_boot: bool, scope: PlanScope) -> Disk:
    boot = block.value("boot")
    if isinstance(boot, bool):
        is_boot = boot

    replica_zones = block.value("replica_zones")
    replication = len(replica_zones) if isinstance(replica_zones, list) and replica_zones else 1

    return Disk(
        size_gb=_disk_size(resource_address, block, is_boot, scope),
        is_ssd=_disk_type(block, is_boot, scope) not in HDD_DISK_TYPES,
        replication_factor=replication,
    )


def scratch_disk() -> Disk:
    return Disk(size_gb=SCRATCH_DISK_SIZE_GB, is_ssd=True)


def sum_disks(disks: Iterable[Disk]) -> Tuple[Decimal, Decimal]:
    """-> (ssd_gb, hdd_gb)"""
    ssd = Decimal(0)
    hdd = Decimal(0)
    for d in disks:
        if d.is_ssd:
            ssd += d.size_gb
        else:
            hdd += d.size_gb
    return ssd, hdd
