# plancarbon/providers/terraform/aws/autoscaling_group.py
from __future__ import annotations

import logging
from typing import List, Optional

from plancarbon.schema.resource import ComputeResource
from plancarbon.schema.value import parse_int

from ..context import PlanScope
from ..plan import ConfigResource
from .base import aws_identification, resource_region
from .instance import instance_specs

log = logging.getLogger(__name__)


def _template_references(resource: ConfigResource) -> List[str]:
    refs: List[str] = []
    for lt in resource.blocks("launch_template"):
        refs.extend(lt.references("id"))
        refs.extend(lt.references("name"))
    for policy in resource.blocks("mixed_instances_policy"):
        for lt in policy.blocks("launch_template"):
            for spec in lt.blocks("launch_template_specification"):
                refs.extend(spec.references("launch_template_id"))
                refs.extend(spec.references("launch_template_name"))
    refs.extend(resource.references("launch_configuration"))
    return refs


def _desired_count(resource: ConfigResource) -> int:
    for key in ("desired_capacity", "min_size"):
        v = resource.value(key)
        if v is not None:
            return parse_int(v, f"{resource.address} {key}")
    return 1


def resolve_autoscaling_group(resource: ConfigResource, scope: PlanScope) -> Optional[ComputeResource]:
    template = scope.references.template(_template_references(resource))
    if template is None:
        log.warning("%s : launch template not found in plan, group is not supported", resource.address)
        return None

    region = resource_region(resource, scope)
    log.debug("  Resolving template %s in region %s", template.config_address, region or "?")
    return ComputeResource(
        identification=aws_identification(resource, scope, count=_desired_count(resource), region=region),
        specs=instance_specs(template, scope),
    )
