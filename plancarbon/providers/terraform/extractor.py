# plancarbon/providers/terraform/extractor.py
"""
Mapping-driven extraction: one planned resource + its ResourceMapping -> ComputeResource.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from plancarbon.errors import MalformedPlanError
from plancarbon.query import query
from plancarbon.schema.mapping import FieldMapping, ResourceMapping
from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import (
    ComputeResource,
    ComputeResourceSpecs,
    ResourceIdentification,
)
from plancarbon.schema.value import ValueWithUnit, memory_to_mb, parse_int, storage_to_gb

from .address import address_module_part, format_index

__all__ = [
    "ExtractionContext",
    "get_value",
    "get_string",
    "get_blocks",
    "get_gpus",
    "extract_compute_resource",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionContext:
    resource_address: str
    mapping: ResourceMapping
    resource: Dict[str, Any]
    provider: Provider


# ---------------- lookups ----------------

def _lookup(fields: Sequence[FieldMapping], node: Any) -> Optional[ValueWithUnit]:
    """First match of the first field mapping that finds anything; defaults only when none does."""
    for fm in fields:
        for path in fm.paths:
            for match in query(node, path):
                v = fm.mapped_value(match)
                if v is not None:
                    return ValueWithUnit.parse(v, fm.unit)
    for fm in fields:
        if fm.default is not None:
            return ValueWithUnit.parse(fm.mapped_value(fm.default), fm.unit)
    return None


def get_value(name: str, ctx: ExtractionContext) -> Optional[ValueWithUnit]:
    return _lookup(ctx.mapping.field_mappings(name), ctx.resource)


def get_string(name: str, ctx: ExtractionContext) -> Optional[str]:
    v = get_value(name, ctx)
    if v is None or v.value is None:
        return None
    return str(v.value)


def _required_string(name: str, ctx: ExtractionContext) -> str:
    v = get_string(name, ctx)
    if v is None:
        raise MalformedPlanError(f"{ctx.resource_address}: cannot find '{name}' of resource")
    return v


def get_blocks(name: str, ctx: ExtractionContext) -> List[Dict[str, Optional[ValueWithUnit]]]:
    blocks: List[Dict[str, Optional[ValueWithUnit]]] = []
    for bm in ctx.mapping.block_mappings(name):
        for path in bm.paths:
            for match in query(ctx.resource, path):
                nodes = match if isinstance(match, list) else [match]
                for node in nodes:
                    if not isinstance(node, dict):
                        continue
                    blocks.append({prop: _lookup(fields, node) for prop, fields in bm.properties.items()})
    return blocks


def get_gpus(ctx: ExtractionContext) -> List[str]:
    gpu_types: List[str] = []
    for gpu in get_blocks("guest_accelerator", ctx):
        gpu_type = gpu.get("type")
        if gpu_type is None or gpu_type.value is None:
            raise MalformedPlanError(f"{ctx.resource_address}: cannot find GPU type")
        count = gpu.get("count")
        if count is None or count.value is None:
            continue
        gpu_types.extend([str(gpu_type.value)] * parse_int(count.value, "GPU count"))
    return gpu_types


def _optional_int(name: str, ctx: ExtractionContext) -> Optional[int]:
    v = get_value(name, ctx)
    if v is None or v.value is None:
        return None
    return parse_int(v.value, f"{ctx.resource_address} {name}")


# ---------------- extraction ----------------

def extract_compute_resource(ctx: ExtractionContext) -> ComputeResource:
    name = _required_string("name", ctx)
    region = _required_string("region", ctx)
    resource_type = _required_string("type", ctx)

    index = ctx.resource.get("index")
    if index is not None:
        name = f"{name}{format_index(index)}"

    specs = ComputeResourceSpecs()

    vcpus = _optional_int("vCPUs", ctx)
    if vcpus is not None:
        specs.vcpus = vcpus

    memory = get_value("memory", ctx)
    if memory is not None and memory.value is not None:
        specs.memory_mb = memory_to_mb(memory)

    specs.gpu_types = get_gpus(ctx)

    cpu_type = get_string("cpu_platform", ctx)
    if cpu_type is not None:
        specs.cpu_type = cpu_type

    replication = _optional_int("replication_factor", ctx)
    if replication is not None:
        specs.replication_factor = replication

    ssd = Decimal(0)
    hdd = Decimal(0)
    for storage in get_blocks("storage", ctx):
        size = storage.get("size")
        if size is None or size.value is None:
            continue
        size_gb = storage_to_gb(size)
        storage_type = storage.get("type")
        if storage_type is not None and str(storage_type.value).lower() == "ssd":
            ssd += size_gb
        else:
            hdd += size_gb
    specs.ssd_storage_gb = ssd
    specs.hdd_storage_gb = hdd

    count = _optional_int("count", ctx)

    resource = ComputeResource(
        identification=ResourceIdentification(
            name=name,
            resource_type=resource_type,
            provider=ctx.provider,
            region=region,
            count=count if count is not None else 1,
            module_address=address_module_part(ctx.resource_address),
        ),
        specs=specs,
    )
    log.debug("    Reading resource '%s'", resource.address)
    return resource
