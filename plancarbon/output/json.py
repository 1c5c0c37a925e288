# plancarbon/output/json.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from plancarbon.schema.resource import Resource


def to_dicts(resources: Mapping[str, Resource]) -> List[Dict[str, Any]]:
    return [resources[address].to_dict() for address in sorted(resources)]


def to_json(resources: Mapping[str, Resource], pretty: bool = False) -> bytes:
    """
    JSON list of the resources sorted by address. Storage sizes are written as
    strings so Decimal values keep their exact digits.
    """
    payload = to_dicts(resources)
    if pretty:
        return json.dumps(payload, indent=2, separators=(", ", ": ")).encode("utf-8")
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")
