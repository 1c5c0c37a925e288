# plancarbon/providers/terraform/aws/data.py
from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, Optional

from plancarbon.query import query
from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import DataImageResource, ResourceIdentification
from plancarbon.schema.value import to_decimal

from ..address import parse_address


def _root_volume_size(values: Dict[str, Any]) -> Optional[Decimal]:
    root = values.get("root_device_name")
    path = "block_device_mappings.*.ebs"
    if root:
        path = f"block_device_mappings[device_name={json.dumps(root)}].ebs"
    for ebs in query(values, path):
        # a map of strings in the data source, a block elsewhere
        for e in ebs if isinstance(ebs, list) else [ebs]:
            if isinstance(e, dict):
                size = to_decimal(e.get("volume_size"))
                if size is not None:
                    return size
    return None


def ami(raw: Dict[str, Any]) -> Optional[DataImageResource]:
    """aws_ami: the size of its root volume sizes the root volume of instances started from it."""
    address = raw.get("address") or ""
    parsed = parse_address(address)
    values = raw.get("values") or {}
    return DataImageResource(
        identification=ResourceIdentification(
            name=raw.get("name") or parsed.name,
            resource_type=raw.get("type") or parsed.resource_type,
            provider=Provider.AWS,
            self_link=values.get("arn") or "",
            module_address=parsed.module,
        ),
        disk_size_gb=_root_volume_size(values),
        is_data_source=(raw.get("mode") or ("data" if parsed.is_data else "managed")) == "data",
    )
