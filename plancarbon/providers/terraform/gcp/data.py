# plancarbon/providers/terraform/gcp/data.py
from __future__ import annotations

from typing import Any, Dict, Optional

from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import DataImageResource, ResourceIdentification
from plancarbon.schema.value import to_decimal

from ..address import parse_address


def compute_image(raw: Dict[str, Any]) -> Optional[DataImageResource]:
    """google_compute_image, data source or managed: only its disk size matters."""
    address = raw.get("address") or ""
    parsed = parse_address(address)
    values = raw.get("values") or {}
    return DataImageResource(
        identification=ResourceIdentification(
            name=raw.get("name") or parsed.name,
            resource_type=raw.get("type") or parsed.resource_type,
            provider=Provider.GCP,
            self_link=values.get("self_link") or "",
            module_address=parsed.module,
        ),
        disk_size_gb=to_decimal(values.get("disk_size_gb")),
        is_data_source=(raw.get("mode") or ("data" if parsed.is_data else "managed")) == "data",
    )
