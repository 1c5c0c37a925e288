# plancarbon/providers/terraform/gcp/resource_registry.py
from __future__ import annotations

from typing import Callable, Dict, Tuple

from .compute_disk import resolve_compute_disk
from .compute_instance import resolve_compute_instance
from .data import compute_image
from .instance_group_manager import resolve_instance_group_manager
from .sql_database_instance import resolve_sql_database_instance

RESOURCE_REGISTRY: Dict[str, Callable] = {
    "google_compute_instance": resolve_compute_instance,
    "google_compute_disk": resolve_compute_disk,
    "google_compute_region_disk": resolve_compute_disk,
    "google_sql_database_instance": resolve_sql_database_instance,
    "google_compute_instance_group_manager": resolve_instance_group_manager,
    "google_compute_region_instance_group_manager": resolve_instance_group_manager,
}

# referenced by the resources above, read before them
DATA_RESOURCE_REGISTRY: Dict[str, Callable] = {
    "google_compute_image": compute_image,
}

TEMPLATE_TYPES: Tuple[str, ...] = ("google_compute_instance_template",)

__all__ = ["RESOURCE_REGISTRY", "DATA_RESOURCE_REGISTRY", "TEMPLATE_TYPES"]
