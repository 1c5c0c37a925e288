# plancarbon/providers/terraform/gcp/sql_database_instance.py
from __future__ import annotations

from decimal import Decimal

from plancarbon.errors import ConfigurationError
from plancarbon.schema.resource import ComputeResource, ComputeResourceSpecs
from plancarbon.schema.value import to_decimal

from ..context import PlanScope
from ..plan import ConfigResource
from .base import gcp_identification

DEFAULT_DISK_TYPE = "PD_SSD"
DEFAULT_DISK_SIZE_GB = Decimal(10)

# a regional (high availability) instance keeps a standby in a second zone
REGIONAL_REPLICATION_FACTOR = 2


def resolve_sql_database_instance(resource: ConfigResource, scope: PlanScope) -> ComputeResource:
    specs = ComputeResourceSpecs()

    settings = resource.blocks("settings")
    if settings:
        s = settings[0]

        if s.value("availability_type") == "REGIONAL":
            specs.replication_factor = REGIONAL_REPLICATION_FACTOR

        tier_name = s.value("tier", "")
        if tier_name:
            tier = scope.catalogs.gcp_sql_tier(str(tier_name))
            specs.vcpus = tier.vcpus
            specs.memory_mb = tier.memory_mb

        disk_type = str(s.value("disk_type", DEFAULT_DISK_TYPE)).upper()
        disk_size = to_decimal(s.value("disk_size"), DEFAULT_DISK_SIZE_GB)
        if disk_type == "PD_SSD":
            specs.ssd_storage_gb = disk_size
        elif disk_type == "PD_HDD":
            specs.hdd_storage_gb = disk_size
        else:
            raise ConfigurationError(f"{resource.address} : wrong type of disk : {disk_type}")

    return ComputeResource(identification=gcp_identification(resource, scope), specs=specs)
