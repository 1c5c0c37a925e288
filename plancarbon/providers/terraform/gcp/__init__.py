from __future__ import annotations

from .resource_registry import DATA_RESOURCE_REGISTRY, RESOURCE_REGISTRY, TEMPLATE_TYPES

__all__ = ["RESOURCE_REGISTRY", "DATA_RESOURCE_REGISTRY", "TEMPLATE_TYPES"]
