# plancarbon/schema/mapping.py
"""
Declarative mapping table: resource type -> where to find its instances in the
plan and, per canonical field, which paths hold the value and in which unit.

Ignored resource entries are exact type names or regular expressions matched
against the whole type name: "google_.*_iam_member" ignores
"google_project_iam_member", "iam_member" ignores nothing. Write ".*iam_member.*"
for a substring match.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Pattern, Tuple

from plancarbon.data import load_json_data
from plancarbon.errors import ConfigurationError, UnknownProviderError
from plancarbon.schema.provider import Provider

__all__ = [
    "RegexExtraction",
    "FieldMapping",
    "BlockMapping",
    "ResourceMapping",
    "IgnoreRule",
    "Mappings",
    "SCALAR_PROPERTIES",
    "BLOCK_PROPERTIES",
    "parse_mappings",
    "load_mappings",
]

MAPPINGS_FILE = "mappings.json"

SCALAR_PROPERTIES = (
    "name",
    "region",
    "type",
    "vCPUs",
    "memory",
    "cpu_platform",
    "replication_factor",
    "count",
)
BLOCK_PROPERTIES = ("guest_accelerator", "storage")


@dataclass(frozen=True)
class RegexExtraction:
    pattern: Pattern[str]
    group: int = 1

    def apply(self, value: str) -> Optional[str]:
        m = self.pattern.search(value)
        if not m:
            return None
        return m.group(self.group)


@dataclass(frozen=True)
class FieldMapping:
    paths: Tuple[str, ...]
    unit: Optional[str] = None
    default: Any = None
    regex: Optional[RegexExtraction] = None
    value_mapping: Dict[str, Any] = field(default_factory=dict)

    def mapped_value(self, raw: Any) -> Any:
        if isinstance(raw, str) and self.regex is not None:
            raw = self.regex.apply(raw)
        if self.value_mapping and raw is not None:
            return self.value_mapping.get(str(raw), raw)
        return raw


@dataclass(frozen=True)
class BlockMapping:
    """A repeated block (storage device, GPU) enumerated by `paths`, read with `properties`."""

    paths: Tuple[str, ...]
    properties: Dict[str, Tuple[FieldMapping, ...]]


@dataclass(frozen=True)
class ResourceMapping:
    resource_type: str
    paths: Tuple[str, ...]
    properties: Dict[str, Tuple[FieldMapping, ...]] = field(default_factory=dict)
    blocks: Dict[str, Tuple[BlockMapping, ...]] = field(default_factory=dict)

    def field_mappings(self, name: str) -> Tuple[FieldMapping, ...]:
        return self.properties.get(name, ())

    def block_mappings(self, name: str) -> Tuple[BlockMapping, ...]:
        return self.blocks.get(name, ())


@dataclass(frozen=True)
class IgnoreRule:
    raw: str
    pattern: Optional[Pattern[str]]

    def matches(self, resource_type: str) -> bool:
        if self.raw == resource_type:
            return True
        # whole-name match, so "google_sql_database" never hides "google_sql_database_instance"
        return bool(self.pattern and self.pattern.fullmatch(resource_type))


@dataclass(frozen=True)
class Mappings:
    compute_resource: Dict[str, ResourceMapping]
    ignored_resources: Dict[Provider, Tuple[IgnoreRule, ...]]

    def is_ignored(self, resource_type: str, provider: Provider) -> bool:
        return any(r.matches(resource_type) for r in self.ignored_resources.get(provider, ()))


# ---------------- parsing ----------------

def _as_list(v: Any) -> List[Any]:
    if v is None:
        return []
    return list(v) if isinstance(v, (list, tuple)) else [v]


def _compile(pattern: str, where: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"{where}: invalid regular expression {pattern!r}: {e}") from e


def _parse_field(raw: Any, where: str) -> FieldMapping:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: expected an object, got {type(raw).__name__}")
    paths = tuple(_as_list(raw.get("paths")))
    if not paths:
        raise ConfigurationError(f"{where}: 'paths' is required")

    regex = None
    if raw.get("regex") is not None:
        rx = raw["regex"]
        if not isinstance(rx, dict) or "pattern" not in rx:
            raise ConfigurationError(f"{where}: regex needs a 'pattern'")
        regex = RegexExtraction(_compile(rx["pattern"], where), int(rx.get("group", 1)))

    value_mapping = raw.get("value_mapping") or {}
    if not isinstance(value_mapping, dict):
        raise ConfigurationError(f"{where}: value_mapping must be an object")

    unit = raw.get("unit")
    return FieldMapping(
        paths=paths,
        unit=unit.lower() if isinstance(unit, str) else None,
        default=raw.get("default"),
        regex=regex,
        value_mapping={str(k): v for k, v in value_mapping.items()},
    )


def _parse_fields(raw: Any, where: str) -> Tuple[FieldMapping, ...]:
    return tuple(_parse_field(item, f"{where}[{i}]") for i, item in enumerate(_as_list(raw)))


def _parse_block(raw: Any, where: str) -> BlockMapping:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: expected an object")
    props = raw.get("properties")
    if not isinstance(props, dict) or not props:
        raise ConfigurationError(f"{where}: block mapping needs 'properties'")
    paths = tuple(_as_list(raw.get("paths")))
    if not paths:
        raise ConfigurationError(f"{where}: 'paths' is required")
    return BlockMapping(
        paths=paths,
        properties={k: _parse_fields(v, f"{where}.{k}") for k, v in props.items()},
    )


def _parse_resource(resource_type: str, raw: Dict[str, Any]) -> ResourceMapping:
    where = f"compute_resource.{resource_type}"
    paths = tuple(_as_list(raw.get("paths")))
    if not paths:
        raise ConfigurationError(f"{where}: 'paths' is required")

    properties: Dict[str, Tuple[FieldMapping, ...]] = {}
    blocks: Dict[str, Tuple[BlockMapping, ...]] = {}
    for name, spec in (raw.get("properties") or {}).items():
        if name in SCALAR_PROPERTIES:
            properties[name] = _parse_fields(spec, f"{where}.{name}")
        elif name in BLOCK_PROPERTIES:
            blocks[name] = tuple(
                _parse_block(b, f"{where}.{name}[{i}]") for i, b in enumerate(_as_list(spec))
            )
        else:
            raise ConfigurationError(f"{where}: unknown property {name!r}")
    return ResourceMapping(resource_type, paths, properties, blocks)


def parse_mappings(raw: Dict[str, Any]) -> Mappings:
    if not isinstance(raw, dict):
        raise ConfigurationError("mapping table must be a JSON object")

    ignored: Dict[Provider, Tuple[IgnoreRule, ...]] = {}
    for provider_name, general in (raw.get("general") or {}).items():
        try:
            provider = Provider.parse(provider_name)
        except UnknownProviderError as e:
            raise ConfigurationError(f"general: {e}") from e
        rules = []
        for entry in (general or {}).get("ignored_resources") or []:
            rules.append(IgnoreRule(raw=entry, pattern=_compile(entry, f"general.{provider_name}")))
        ignored[provider] = tuple(rules)

    compute = {
        rtype: _parse_resource(rtype, spec or {})
        for rtype, spec in (raw.get("compute_resource") or {}).items()
    }
    return Mappings(compute_resource=compute, ignored_resources=ignored)


@lru_cache(maxsize=None)
def load_mappings(data_path: Optional[str] = None) -> Mappings:
    """Loaded once per data path, never mutated afterwards."""
    return parse_mappings(load_json_data(MAPPINGS_FILE, data_path))
