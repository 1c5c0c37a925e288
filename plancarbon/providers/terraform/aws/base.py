# plancarbon/providers/terraform/aws/base.py
from __future__ import annotations

import re
from typing import Any, Optional

from plancarbon.errors import ConfigurationError
from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import ResourceIdentification

from ..context import PlanScope
from ..plan import ConfigResource

PROVIDER_NAME = "aws"

DEFAULT_VOLUME_TYPE = "gp2"
SSD_VOLUME_TYPES = ("gp2", "gp3", "io1", "io2")
HDD_VOLUME_TYPES = ("st1", "sc1", "standard")

# eu-west-3a -> eu-west-3 ; us-gov-west-1b -> us-gov-west-1
_AZ_RE = re.compile(r"^(.*[0-9])[a-z]$")


def az_to_region(availability_zone: str) -> str:
    m = _AZ_RE.match(availability_zone or "")
    return m.group(1) if m else (availability_zone or "")


def is_ssd_volume(resource_address: str, volume_type: Any) -> bool:
    vt = str(volume_type or DEFAULT_VOLUME_TYPE).lower()
    if vt in SSD_VOLUME_TYPES:
        return True
    if vt in HDD_VOLUME_TYPES:
        return False
    raise ConfigurationError(f"{resource_address} : unknown EBS volume type {volume_type!r}")


def resource_region(resource: ConfigResource, scope: PlanScope, fallback: str = "") -> str:
    region = scope.provider_setting(PROVIDER_NAME, "region")
    if region:
        return str(region)
    az = resource.value("availability_zone")
    if az:
        return az_to_region(str(az))
    zones = resource.value("availability_zones")
    if isinstance(zones, list) and zones:
        return az_to_region(str(zones[0]))
    return fallback


def aws_identification(
    resource: ConfigResource, scope: PlanScope, count: int = 1, region: Optional[str] = None
) -> ResourceIdentification:
    arn = resource.value("arn")
    return ResourceIdentification(
        name=resource.instance_name,
        resource_type=resource.resource_type,
        provider=Provider.AWS,
        region=region if region is not None else resource_region(resource, scope),
        self_link=arn if isinstance(arn, str) else "",
        count=count,
        module_address=resource.module_address,
    )
