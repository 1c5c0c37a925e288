# plancarbon/providers/terraform/gcp/compute_instance.py
from __future__ import annotations

import logging
from typing import List, Optional

from plancarbon.errors import MalformedPlanError
from plancarbon.schema.resource import ComputeResource, ComputeResourceSpecs
from plancarbon.schema.value import parse_int

from ..context import PlanScope
from ..plan import Block, ConfigResource
from .base import gcp_identification, resource_zone
from .disk import Disk, read_disk, scratch_disk, sum_disks

log = logging.getLogger(__name__)


def _disks(resource: ConfigResource, scope: PlanScope) -> List[Disk]:
    disks: List[Disk] = []
    for boot_disk in resource.blocks("boot_disk"):
        if boot_disk.declares("source"):
            # attached google_compute_disk, counted as a resource of its own
            continue
        params = boot_disk.blocks("initialize_params") or [Block(module=boot_disk.module)]
        for p in params:
            disks.append(read_disk(resource.address, p, True, scope))
    for d in resource.blocks("disk"):
        if d.declares("source"):
            continue
        disks.append(read_disk(resource.address, d, False, scope))
    for _ in resource.blocks("scratch_disk"):
        disks.append(scratch_disk())
    return disks


def _guest_accelerators(resource: ConfigResource) -> List[str]:
    gpus: List[str] = []
    for ga in resource.blocks("guest_accelerator"):
        count = ga.value("count")
        if count is None:
            continue
        gpu_type = ga.value("type")
        if not gpu_type:
            raise MalformedPlanError(f"{resource.address}: guest_accelerator without type")
        gpus.extend([str(gpu_type)] * parse_int(count, f"{resource.address} guest_accelerator count"))
    return gpus


def compute_specs(resource: ConfigResource, scope: PlanScope, zone: Optional[str] = None) -> ComputeResourceSpecs:
    """Specs of a google_compute_instance or google_compute_instance_template."""
    machine_type_name = resource.value("machine_type")
    if not machine_type_name:
        raise MalformedPlanError(f"{resource.address}: cannot find machine_type")
    zone = zone or resource_zone(resource, scope)
    machine_type = scope.catalogs.gcp_machine_type(str(machine_type_name), zone)

    ssd, hdd = sum_disks(_disks(resource, scope))

    return ComputeResourceSpecs(
        vcpus=machine_type.vcpus,
        memory_mb=machine_type.memory_mb,
        cpu_type=str(resource.value("min_cpu_platform") or resource.value("cpu_platform") or ""),
        gpu_types=list(machine_type.gpu_types) + _guest_accelerators(resource),
        ssd_storage_gb=ssd,
        hdd_storage_gb=hdd,
        replication_factor=1,
    )


def resolve_compute_instance(resource: ConfigResource, scope: PlanScope) -> ComputeResource:
    return ComputeResource(
        identification=gcp_identification(resource, scope),
        specs=compute_specs(resource, scope),
    )


def resolve_instance_template(resource: ConfigResource, scope: PlanScope, zone: Optional[str]) -> ComputeResource:
    """Templates have no location of their own, the group using them gives it."""
    log.debug("  Resolving template %s in zone %s", resource.config_address, zone or "?")
    return ComputeResource(
        identification=gcp_identification(resource, scope),
        specs=compute_specs(resource, scope, zone),
    )
