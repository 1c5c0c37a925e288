# plancarbon/providers/terraform/gcp/base.py
from __future__ import annotations

from typing import Any, Optional

from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import ResourceIdentification

from ..context import PlanScope
from ..plan import Block, ConfigResource

PROVIDER_NAME = "google"


def _last_segment(v: Any) -> str:
    # "https://www.googleapis.com/compute/v1/projects/p/zones/europe-west1-b" -> "europe-west1-b"
    return str(v).rstrip("/").rsplit("/", 1)[-1]


def zone_to_region(zone: str) -> str:
    """europe-west1-b -> europe-west1"""
    return "-".join(_last_segment(zone).split("-")[:2])


def resource_zone(block: Block, scope: PlanScope) -> Optional[str]:
    zone = block.value("zone") or scope.provider_setting(PROVIDER_NAME, "zone")
    return _last_segment(zone) if zone else None


def resource_region(resource: ConfigResource, scope: PlanScope) -> str:
    region = resource.value("region")
    if region:
        return _last_segment(region)
    zone = resource.value("zone")
    if zone:
        return zone_to_region(zone)
    replica_zones = resource.value("replica_zones")
    if isinstance(replica_zones, list) and replica_zones:
        return zone_to_region(replica_zones[0])
    region = scope.provider_setting(PROVIDER_NAME, "region")
    if region:
        return _last_segment(region)
    zone = scope.provider_setting(PROVIDER_NAME, "zone")
    if zone:
        return zone_to_region(zone)
    return ""


def gcp_identification(resource: ConfigResource, scope: PlanScope, count: int = 1) -> ResourceIdentification:
    self_link = resource.value("self_link")
    return ResourceIdentification(
        name=resource.instance_name,
        resource_type=resource.resource_type,
        provider=Provider.GCP,
        region=resource_region(resource, scope),
        self_link=self_link if isinstance(self_link, str) else "",
        count=count,
        module_address=resource.module_address,
    )
