# plancarbon/providers/terraform/plan.py
"""
The two views of a `terraform show -json` plan:

- the generic JSON tree (planned_values / prior_state), queried with paths,
- the configuration expressions of each resource (constant values, references
  to other resources, nested blocks), read by the provider resolvers.

A ConfigResource joins both for one resource instance: constants come from the
configuration, everything terraform could only compute at plan time comes from
the planned values of that instance.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from plancarbon.errors import PlanDecodeError

from .address import format_index, parse_address, qualify, strip_address_array

__all__ = [
    "Expression",
    "Block",
    "ConfigResource",
    "Plan",
    "decode_expression",
    "decode_expressions",
]


# ---------------- expressions ----------------

@dataclass(frozen=True)
class Expression:
    constant_value: Any = None
    references: Tuple[str, ...] = ()
    nested_blocks: Tuple[Dict[str, "Expression"], ...] = ()


def decode_expression(raw: Any, where: str = "") -> Expression:
    if isinstance(raw, list):
        blocks = []
        for i, block in enumerate(raw):
            if not isinstance(block, dict):
                raise PlanDecodeError(f"{where}[{i}]: nested block must be an object, got {type(block).__name__}")
            blocks.append(decode_expressions(block, f"{where}[{i}]"))
        return Expression(nested_blocks=tuple(blocks))
    if isinstance(raw, dict):
        refs = raw.get("references") or []
        if not isinstance(refs, list):
            raise PlanDecodeError(f"{where}: references must be a list")
        return Expression(constant_value=raw.get("constant_value"), references=tuple(str(r) for r in refs))
    raise PlanDecodeError(f"{where}: expression must be an object or a list of blocks, got {type(raw).__name__}")


def decode_expressions(raw: Any, where: str = "") -> Dict[str, Expression]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise PlanDecodeError(f"{where}: expressions must be an object")
    return {k: decode_expression(v, f"{where}.{k}" if where else k) for k, v in raw.items()}


# ---------------- blocks / resources ----------------

def _dict_list(v: Any) -> List[Dict[str, Any]]:
    if isinstance(v, list):
        return [x for x in v if isinstance(x, dict)]
    return []


@dataclass(frozen=True)
class Block:
    expressions: Dict[str, Expression] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)
    # configuration module ("module.a.module.b") references are relative to
    module: str = ""

    def expression(self, key: str) -> Optional[Expression]:
        return self.expressions.get(key)

    def constant(self, key: str) -> Any:
        expr = self.expressions.get(key)
        return expr.constant_value if expr is not None else None

    def value(self, key: str, default: Any = None) -> Any:
        v = self.constant(key)
        if v is None:
            v = self.values.get(key)
        return default if v is None else v

    def has(self, key: str) -> bool:
        return self.value(key) is not None or bool(self.references(key))

    def declares(self, key: str) -> bool:
        """Set in the configuration, computed planned values are not looked at."""
        expr = self.expressions.get(key)
        return expr is not None and (expr.constant_value is not None or bool(expr.references))

    def references(self, key: str) -> List[str]:
        expr = self.expressions.get(key)
        if expr is None:
            return []
        return [qualify(self.module, r) for r in expr.references]

    def blocks(self, key: str) -> List["Block"]:
        """
        Nested blocks under `key`, pairing configuration block i with planned block i.
        Attribute-as-block constants (a list of objects) are treated like planned blocks.
        """
        expr = self.expressions.get(key)
        config_blocks = list(expr.nested_blocks) if expr is not None else []
        planned = _dict_list(self.values.get(key))
        if not planned and expr is not None:
            planned = _dict_list(expr.constant_value)
        out = []
        for i in range(max(len(config_blocks), len(planned))):
            out.append(
                Block(
                    expressions=config_blocks[i] if i < len(config_blocks) else {},
                    values=planned[i] if i < len(planned) else {},
                    module=self.module,
                )
            )
        return out


@dataclass(frozen=True)
class ConfigResource(Block):
    address: str = ""
    resource_type: str = ""
    name: str = ""
    mode: str = "managed"
    index: Any = None
    module_address: str = ""   # module part of the planned address, indices kept
    provider_name: str = ""

    @property
    def config_address(self) -> str:
        prefix = "data." if self.mode == "data" else ""
        return qualify(self.module, f"{prefix}{self.resource_type}.{self.name}")

    @property
    def instance_name(self) -> str:
        return f"{self.name}{format_index(self.index)}"


# ---------------- plan ----------------

def _walk_module(module: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for r in module.get("resources") or []:
        if isinstance(r, dict):
            yield r
    for child in module.get("child_modules") or []:
        if isinstance(child, dict):
            yield from _walk_module(child)


class Plan:
    def __init__(self, raw: Dict[str, Any]) -> None:
        if not isinstance(raw, dict):
            raise PlanDecodeError(f"plan must be a JSON object, got {type(raw).__name__}")
        self.raw = raw
        self._config_index: Dict[str, Tuple[str, Dict[str, Any]]] = {}
        self._index_configuration(
            (raw.get("configuration") or {}).get("root_module") or {}, module_path=""
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes, Dict[str, Any], "Plan"]) -> "Plan":
        if isinstance(data, Plan):
            return data
        if isinstance(data, (str, bytes, bytearray)):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise PlanDecodeError(f"invalid plan JSON: {e}") from e
        return cls(data)

    # ---- configuration view ----
    def _index_configuration(self, module: Dict[str, Any], module_path: str) -> None:
        for rc in module.get("resources") or []:
            if not isinstance(rc, dict):
                continue
            addr = rc.get("address") or ""
            self._config_index[qualify(module_path, addr)] = (module_path, rc)
        for name, call in (module.get("module_calls") or {}).items():
            child = (call or {}).get("module") or {}
            self._index_configuration(child, qualify(module_path, f"module.{name}"))

    def provider_config(self, name: str) -> Block:
        configs = (self.raw.get("configuration") or {}).get("provider_config") or {}
        entry = configs.get(name)
        if entry is None:
            entry = next(
                (c for c in configs.values() if isinstance(c, dict) and c.get("name") == name), None
            )
        if not isinstance(entry, dict):
            return Block()
        return Block(expressions=decode_expressions(entry.get("expressions"), f"provider_config.{name}"))

    # ---- generic JSON view ----
    def has_planned_values(self) -> bool:
        return isinstance(self.raw.get("planned_values"), dict)

    def planned_resources(self) -> List[Dict[str, Any]]:
        root = (self.raw.get("planned_values") or {}).get("root_module") or {}
        return list(_walk_module(root))

    def prior_state_resources(self) -> List[Dict[str, Any]]:
        root = ((self.raw.get("prior_state") or {}).get("values") or {}).get("root_module") or {}
        return list(_walk_module(root))

    def resources_of_types(self, types: Iterable[str]) -> List[Dict[str, Any]]:
        """Planned and prior-state resources of the given types, first sighting of an address wins."""
        wanted = set(types)
        seen = set()
        out = []
        for r in self.planned_resources() + self.prior_state_resources():
            addr = r.get("address")
            if r.get("type") in wanted and addr not in seen:
                seen.add(addr)
                out.append(r)
        return out

    # ---- joined view ----
    def config_resource(self, planned: Dict[str, Any]) -> ConfigResource:
        address = planned.get("address") or ""
        parsed = parse_address(address)
        module_path, rc = self._config_index.get(
            strip_address_array(address), (strip_address_array(parsed.module), {})
        )
        return ConfigResource(
            expressions=decode_expressions(rc.get("expressions"), address),
            values=planned.get("values") or {},
            module=module_path,
            address=address,
            resource_type=planned.get("type") or parsed.resource_type,
            name=planned.get("name") or parsed.name,
            mode=planned.get("mode") or ("data" if parsed.is_data else "managed"),
            index=planned.get("index"),
            module_address=parsed.module,
            provider_name=planned.get("provider_name") or "",
        )

    def config_resources_of_types(self, types: Iterable[str]) -> Dict[str, ConfigResource]:
        """
        Configuration address -> ConfigResource for every configured resource of the
        given types, joined with the planned values of its first instance.
        """
        wanted = set(types)
        out: Dict[str, ConfigResource] = {}
        for planned in self.resources_of_types(wanted):
            cr = self.config_resource(planned)
            out.setdefault(cr.config_address, cr)
        for cfg_addr, (module_path, rc) in self._config_index.items():
            if rc.get("type") not in wanted or cfg_addr in out:
                continue
            out[cfg_addr] = ConfigResource(
                expressions=decode_expressions(rc.get("expressions"), cfg_addr),
                module=module_path,
                address=cfg_addr,
                resource_type=rc.get("type") or "",
                name=rc.get("name") or "",
                mode=rc.get("mode") or "managed",
                module_address=module_path,
            )
        return out
