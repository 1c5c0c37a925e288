# plancarbon/providers/terraform/aws/instance.py
"""
EC2 instances, and the launch templates / launch configurations autoscaling
groups start them from. All three share instance_type + block devices.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Tuple

from plancarbon.errors import MalformedPlanError
from plancarbon.schema.resource import ComputeResource, ComputeResourceSpecs
from plancarbon.schema.value import to_decimal

from ..context import PlanScope
from ..plan import Block, ConfigResource
from .base import DEFAULT_VOLUME_TYPE, aws_identification, is_ssd_volume

log = logging.getLogger(__name__)

# (size_gb, is_ssd)
Volume = Tuple[Decimal, bool]


def _root_volume_default_size(resource: ConfigResource, scope: PlanScope) -> Decimal:
    default = scope.config.aws_volume_size_gb
    refs = resource.references("ami") + resource.references("image_id")
    if not refs:
        return default
    return scope.references.image_size_gb(resource.address, refs, default)


def _volume(resource_address: str, block: Block, default_size: Decimal) -> Volume:
    size = to_decimal(block.value("volume_size"), default_size)
    return size, is_ssd_volume(resource_address, block.value("volume_type", DEFAULT_VOLUME_TYPE))


def _volumes(resource: ConfigResource, scope: PlanScope) -> List[Volume]:
    default_size = scope.config.aws_volume_size_gb
    roots = resource.blocks("root_block_device")
    mappings = resource.blocks("block_device_mappings")

    volumes: List[Volume] = []
    if roots or not mappings:
        # every instance has a root volume, declared or not
        root_size = _root_volume_default_size(resource, scope)
        for root in roots or [Block(module=resource.module)]:
            volumes.append(_volume(resource.address, root, root_size))
    for ebs in resource.blocks("ebs_block_device"):
        volumes.append(_volume(resource.address, ebs, default_size))
    # launch templates
    for mapping in mappings:
        for ebs in mapping.blocks("ebs"):
            volumes.append(_volume(resource.address, ebs, default_size))
    return volumes


def instance_specs(resource: ConfigResource, scope: PlanScope) -> ComputeResourceSpecs:
    instance_type_name = resource.value("instance_type")
    if not instance_type_name:
        raise MalformedPlanError(f"{resource.address}: cannot find instance_type")
    instance_type = scope.catalogs.aws_instance_type(str(instance_type_name))

    specs = ComputeResourceSpecs(
        vcpus=instance_type.vcpus,
        memory_mb=instance_type.memory_mb,
        cpu_type=instance_type.cpu_type,
        gpu_types=list(instance_type.gpu_types),
    )
    ssd = Decimal(0)
    hdd = Decimal(0)
    for size, is_ssd in _volumes(resource, scope):
        if is_ssd:
            ssd += size
        else:
            hdd += size
    if instance_type.instance_storage_gb:
        if instance_type.instance_storage_ssd:
            ssd += instance_type.instance_storage_gb
        else:
            hdd += instance_type.instance_storage_gb
    specs.ssd_storage_gb = ssd
    specs.hdd_storage_gb = hdd
    return specs


def resolve_instance(resource: ConfigResource, scope: PlanScope) -> ComputeResource:
    return ComputeResource(
        identification=aws_identification(resource, scope),
        specs=instance_specs(resource, scope),
    )
