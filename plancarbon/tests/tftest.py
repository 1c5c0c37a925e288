# plancarbon/tests/tftest.py
"""
Build `terraform show -json` documents for tests, without running terraform.

Each TfResource lands in planned_values (its module's child_modules entry)
and in configuration (root_module / module_calls). Unless expressions are
given, the configuration is derived from the planned values: scalars become
constant_value, lists of objects become nested blocks.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from plancarbon.config import Config
from plancarbon.providers.terraform.address import format_index
from plancarbon.providers.terraform.context import ParserContext
from plancarbon.providers.terraform.parser import parse_plan_json

_PROVIDER_PREFIXES = {
    "google": "registry.terraform.io/hashicorp/google",
    "aws": "registry.terraform.io/hashicorp/aws",
    "azurerm": "registry.terraform.io/hashicorp/azurerm",
}


def const(value: Any) -> Dict[str, Any]:
    return {"constant_value": value}


def ref(*addresses: str) -> Dict[str, Any]:
    return {"references": list(addresses)}


def expressions_of(values: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in values.items():
        if v is None:
            continue
        if isinstance(v, list) and v and all(isinstance(x, dict) for x in v):
            out[k] = [expressions_of(x) for x in v]
        else:
            out[k] = const(v)
    return out


@dataclass
class TfResource:
    type: str
    name: str
    values: Dict[str, Any] = field(default_factory=dict)
    expressions: Optional[Dict[str, Any]] = None
    mode: str = "managed"
    index: Any = None
    module: str = ""          # "module.a" / "module.a.module.b"
    provider_name: str = ""

    def __post_init__(self) -> None:
        if not self.provider_name:
            prefix = self.type.split("_", 1)[0]
            self.provider_name = _PROVIDER_PREFIXES.get(prefix, prefix)

    @property
    def local_address(self) -> str:
        prefix = "data." if self.mode == "data" else ""
        return f"{prefix}{self.type}.{self.name}"

    @property
    def address(self) -> str:
        local = f"{self.local_address}{format_index(self.index)}"
        return f"{self.module}.{local}" if self.module else local

    def planned(self) -> Dict[str, Any]:
        out = {
            "address": self.address,
            "mode": self.mode,
            "type": self.type,
            "name": self.name,
            "provider_name": self.provider_name,
            "values": self.values,
        }
        if self.index is not None:
            out["index"] = self.index
        return out

    def config(self) -> Dict[str, Any]:
        return {
            "address": self.local_address,
            "mode": self.mode,
            "type": self.type,
            "name": self.name,
            "provider_config_key": self.provider_name.rsplit("/", 1)[-1],
            "expressions": self.expressions if self.expressions is not None else expressions_of(self.values),
        }


def _module_names(module: str) -> List[str]:
    # "module.a.module.b" -> ["a", "b"]
    parts = module.split(".") if module else []
    return [parts[i + 1] for i in range(0, len(parts) - 1, 2) if parts[i] == "module"]


def _planned_module(resources: List[TfResource], names: List[str], address: str) -> Dict[str, Any]:
    module: Dict[str, Any] = {}
    if address:
        module["address"] = address
    depth = len(names)
    own = [r for r in resources if _module_names(r.module) == names]
    if own:
        module["resources"] = [r.planned() for r in own]
    children = sorted({tuple(_module_names(r.module)[: depth + 1]) for r in resources if len(_module_names(r.module)) > depth})
    if children:
        module["child_modules"] = [
            _planned_module(
                [r for r in resources if tuple(_module_names(r.module)[: depth + 1]) == child],
                list(child),
                ".".join(f"module.{n}" for n in child),
            )
            for child in children
        ]
    return module


def _config_module(resources: List[TfResource], names: List[str]) -> Dict[str, Any]:
    depth = len(names)
    seen = set()
    configs = []
    for r in resources:
        if _module_names(r.module) == names and r.local_address not in seen:
            seen.add(r.local_address)
            configs.append(r.config())
    module: Dict[str, Any] = {}
    if configs:
        module["resources"] = configs
    calls = sorted({_module_names(r.module)[depth] for r in resources if len(_module_names(r.module)) > depth})
    if calls:
        module["module_calls"] = {
            name: {
                "source": f"./{name}",
                "module": _config_module(
                    [r for r in resources if _module_names(r.module)[: depth + 1] == names + [name]],
                    names + [name],
                ),
            }
            for name in calls
        }
    return module


def build_plan(
    resources: Iterable[TfResource],
    provider_config: Optional[Dict[str, Dict[str, Any]]] = None,
    prior_state: Iterable[TfResource] = (),
) -> Dict[str, Any]:
    """
    provider_config: {"google": {"zone": "europe-west1-b"}} -> constant expressions.
    prior_state: resources only known from the state (data sources read at plan time).
    """
    resources = list(resources)
    prior = list(prior_state)
    providers = {
        name: {"name": name, "expressions": {k: const(v) for k, v in exprs.items()}}
        for name, exprs in (provider_config or {}).items()
    }
    plan: Dict[str, Any] = {
        "format_version": "1.2",
        "terraform_version": "1.6.2",
        "planned_values": {"root_module": _planned_module(resources, [], "")},
        "configuration": {
            "provider_config": providers,
            "root_module": _config_module(resources + prior, []),
        },
    }
    if prior:
        plan["prior_state"] = {"values": {"root_module": _planned_module(prior, [], "")}}
    return plan


def load_resources(plan: Dict[str, Any], context: Optional[ParserContext] = None):
    """Parse through a JSON round-trip, the way plans reach the parser. Defaults ignore the environment."""
    return parse_plan_json(json.dumps(plan), context or ParserContext.default(Config()))
