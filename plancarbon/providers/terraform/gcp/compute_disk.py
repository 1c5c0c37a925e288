# plancarbon/providers/terraform/gcp/compute_disk.py
from __future__ import annotations

from plancarbon.schema.resource import ComputeResource, ComputeResourceSpecs

from ..context import PlanScope
from ..plan import ConfigResource
from .base import gcp_identification
from .disk import read_disk, sum_disks


def resolve_compute_disk(resource: ConfigResource, scope: PlanScope) -> ComputeResource:
    """google_compute_disk and google_compute_region_disk: the resource is the disk block."""
    disk = read_disk(resource.address, resource, False, scope)
    ssd, hdd = sum_disks([disk])
    return ComputeResource(
        identification=gcp_identification(resource, scope),
        specs=ComputeResourceSpecs(
            ssd_storage_gb=ssd,
            hdd_storage_gb=hdd,
            replication_factor=disk.replication_factor,
        ),
    )
