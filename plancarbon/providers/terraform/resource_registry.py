# plancarbon/providers/terraform/resource_registry.py
from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from . import aws, gcp


@dataclass(frozen=True)
class Registries:
    resources: Dict[str, Callable]
    data_resources: Dict[str, Callable]
    template_types: Tuple[str, ...]


# Built once on first use, never mutated afterwards
_registries: Optional[Registries] = None
_lock = Lock()


def _init_registries() -> Registries:
    """Merge the provider registries (GCP, AWS)."""
    resources: Dict[str, Callable] = {}
    data_resources: Dict[str, Callable] = {}
    template_types: Tuple[str, ...] = ()
    for provider in (gcp, aws):
        resources.update(provider.RESOURCE_REGISTRY)
        data_resources.update(provider.DATA_RESOURCE_REGISTRY)
        template_types += provider.TEMPLATE_TYPES
    return Registries(resources=resources, data_resources=data_resources, template_types=template_types)


def _get() -> Registries:
    global _registries
    if _registries is None:
        with _lock:
            if _registries is None:
                _registries = _init_registries()
    return _registries


def get_resource_registry() -> Dict[str, Callable]:
    """resource type -> resolver(ConfigResource, PlanScope) -> Resource | None"""
    return dict(_get().resources)


def get_data_resource_registry() -> Dict[str, Callable]:
    """resource type -> builder(raw planned resource) -> DataImageResource | None"""
    return dict(_get().data_resources)


def get_template_types() -> Tuple[str, ...]:
    return _get().template_types
