from __future__ import annotations

from .provider import Provider, parse_provider
from .resource import (
    ComputeResource,
    ComputeResourceSpecs,
    DataImageResource,
    Resource,
    ResourceIdentification,
    UnsupportedResource,
)
from .value import ValueWithUnit

__all__ = [
    "Provider",
    "parse_provider",
    "ComputeResource",
    "ComputeResourceSpecs",
    "DataImageResource",
    "Resource",
    "ResourceIdentification",
    "UnsupportedResource",
    "ValueWithUnit",
]
