# plancarbon/providers/terraform/address.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

# [module.a[0].module.b.][data.]type.name[index]
_ADDRESS_RE = re.compile(
    r"^(?:(?P<module>.*?)\.)?(?P<data>data\.)?"
    r"(?P<type>[A-Za-z0-9_-]+)\.(?P<name>[A-Za-z0-9_-]+)(?P<index>\[[^\]]*\])?$"
)
_INDEX_RE = re.compile(r"\[[^\]]*\]")


@dataclass(frozen=True)
class Address:
    module: str
    is_data: bool
    resource_type: str
    name: str
    index: str = ""

    @property
    def resource_part(self) -> str:
        prefix = "data." if self.is_data else ""
        return f"{prefix}{self.resource_type}.{self.name}{self.index}"


def parse_address(address: str) -> Address:
    m = _ADDRESS_RE.match(address or "")
    if not m:
        return Address(module="", is_data=False, resource_type="", name=address or "")
    return Address(
        module=m.group("module") or "",
        is_data=bool(m.group("data")),
        resource_type=m.group("type"),
        name=m.group("name"),
        index=m.group("index") or "",
    )


def address_module_part(address: str) -> str:
    """ "module.a[0].aws_x.y" -> "module.a[0]" """
    return parse_address(address).module


def strip_address_array(address: str) -> str:
    """
    Remove every [N] / ["key"] so a planned address matches its configuration address:
    "module.a[0].aws_x.y[1]" -> "module.a.aws_x.y"
    """
    return _INDEX_RE.sub("", address)


def qualify(module_addr: str, ref_addr: str) -> str:
    """Prefix a reference with the current module path if present."""
    return f"{module_addr}.{ref_addr}" if module_addr else ref_addr


def format_index(index: Any) -> str:
    """count index -> "[0]", for_each key -> '["a"]' (terraform's own notation)."""
    if index is None:
        return ""
    if isinstance(index, bool):
        return f"[{json.dumps(index)}]"
    if isinstance(index, float) and index.is_integer():
        index = int(index)
    if isinstance(index, int):
        return f"[{index}]"
    return f"[{json.dumps(str(index))}]"
