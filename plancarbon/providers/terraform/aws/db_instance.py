# plancarbon/providers/terraform/aws/db_instance.py
from __future__ import annotations

from decimal import Decimal

from plancarbon.errors import MalformedPlanError
from plancarbon.schema.resource import ComputeResource, ComputeResourceSpecs
from plancarbon.schema.value import to_decimal

from ..context import PlanScope
from ..plan import ConfigResource
from .base import DEFAULT_VOLUME_TYPE, aws_identification, is_ssd_volume

MULTI_AZ_REPLICATION_FACTOR = 2


def _to_bool(x) -> bool:
    if isinstance(x, bool):
        return x
    return str(x).strip().lower() in ("1", "true", "yes", "y", "on")


def resolve_db_instance(resource: ConfigResource, scope: PlanScope) -> ComputeResource:
    instance_class = resource.value("instance_class")
    if not instance_class:
        raise MalformedPlanError(f"{resource.address}: cannot find instance_class")
    # db.m5.large is sized like m5.large
    name = str(instance_class)
    if name.startswith("db."):
        name = name[3:]
    instance_type = scope.catalogs.aws_instance_type(name)

    specs = ComputeResourceSpecs(
        vcpus=instance_type.vcpus,
        memory_mb=instance_type.memory_mb,
        cpu_type=instance_type.cpu_type,
    )
    # aurora instances have no allocated_storage, the cluster volume is elsewhere
    storage = to_decimal(resource.value("allocated_storage"), Decimal(0))
    if is_ssd_volume(resource.address, resource.value("storage_type", DEFAULT_VOLUME_TYPE)):
        specs.ssd_storage_gb = storage
    else:
        specs.hdd_storage_gb = storage
    if _to_bool(resource.value("multi_az", False)):
        specs.replication_factor = MULTI_AZ_REPLICATION_FACTOR

    return ComputeResource(identification=aws_identification(resource, scope), specs=specs)
