# plancarbon/schema/resource.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from .provider import Provider

__all__ = [
    "ResourceIdentification",
    "ComputeResourceSpecs",
    "ComputeResource",
    "DataImageResource",
    "UnsupportedResource",
    "Resource",
]


@dataclass(frozen=True)
class ResourceIdentification:
    name: str
    resource_type: str
    provider: Provider
    region: str = ""
    self_link: str = ""
    count: int = 1
    module_address: str = ""

    @property
    def address(self) -> str:
        # Same form terraform uses: [module.x.]type.name[index]
        base = f"{self.resource_type}.{self.name}"
        return f"{self.module_address}.{base}" if self.module_address else base

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "ResourceType": self.resource_type,
            "Provider": str(self.provider),
            "Region": self.region,
            "SelfLink": self.self_link,
            "Count": self.count,
        }


@dataclass
class ComputeResourceSpecs:
    vcpus: int = 0
    memory_mb: int = 0
    cpu_type: str = ""
    gpu_types: List[str] = field(default_factory=list)
    ssd_storage_gb: Decimal = Decimal(0)
    hdd_storage_gb: Decimal = Decimal(0)
    replication_factor: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "VCPUs": self.vcpus,
            "MemoryMb": self.memory_mb,
            "CPUType": self.cpu_type,
            "GpuTypes": list(self.gpu_types),
            "SsdStorage": str(self.ssd_storage_gb),
            "HddStorage": str(self.hdd_storage_gb),
            "ReplicationFactor": self.replication_factor,
        }


@dataclass(frozen=True)
class ComputeResource:
    identification: ResourceIdentification
    specs: ComputeResourceSpecs

    @property
    def address(self) -> str:
        return self.identification.address

    def is_supported(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Address": self.address,
            "Identification": self.identification.to_dict(),
            "Specs": self.specs.to_dict(),
        }


@dataclass(frozen=True)
class DataImageResource:
    """A disk image (GCP image, AWS AMI) only read to size the disks built from it."""

    identification: ResourceIdentification
    disk_size_gb: Optional[Decimal] = None
    # managed images (google_compute_image resources) are referenced without "data."
    is_data_source: bool = True

    @property
    def address(self) -> str:
        ident = self.identification
        if not self.is_data_source:
            return ident.address
        base = f"data.{ident.resource_type}.{ident.name}"
        return f"{ident.module_address}.{base}" if ident.module_address else base

    def is_supported(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Address": self.address,
            "Identification": self.identification.to_dict(),
            "DiskSizeGb": None if self.disk_size_gb is None else str(self.disk_size_gb),
        }


@dataclass(frozen=True)
class UnsupportedResource:
    identification: ResourceIdentification

    @property
    def address(self) -> str:
        return self.identification.address

    def is_supported(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Address": self.address,
            "Identification": self.identification.to_dict(),
            "Unsupported": True,
        }


Resource = Union[ComputeResource, DataImageResource, UnsupportedResource]
