# plancarbon/providers/terraform/gcp/instance_group_manager.py
"""
Managed instance groups: `target_size` copies of the instance described by
the group's instance template.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from plancarbon.schema.resource import ComputeResource
from plancarbon.schema.value import parse_int

from ..context import PlanScope
from ..plan import ConfigResource
from .base import gcp_identification, resource_region, resource_zone
from .compute_instance import resolve_instance_template

log = logging.getLogger(__name__)


def _template_references(resource: ConfigResource) -> List[str]:
    refs: List[str] = []
    for version in resource.blocks("version"):
        refs.extend(version.references("instance_template"))
    # pre-4.0 providers had a top level instance_template
    refs.extend(resource.references("instance_template"))
    return refs


def _group_zone(resource: ConfigResource, scope: PlanScope) -> Optional[str]:
    if resource.resource_type == "google_compute_region_instance_group_manager":
        zones = resource.value("distribution_policy_zones")
        if isinstance(zones, list) and zones:
            return str(zones[0])
        return resource_region(resource, scope) or None
    return resource_zone(resource, scope)


def resolve_instance_group_manager(resource: ConfigResource, scope: PlanScope) -> Optional[ComputeResource]:
    template = scope.references.template(_template_references(resource))
    if template is None:
        log.warning("%s : instance template not found in plan, group is not supported", resource.address)
        return None

    target_size = resource.value("target_size")
    count = 1 if target_size is None else parse_int(target_size, f"{resource.address} target_size")

    instance = resolve_instance_template(template, scope, _group_zone(resource, scope))
    return ComputeResource(
        identification=gcp_identification(resource, scope, count=count),
        specs=instance.specs,
    )
