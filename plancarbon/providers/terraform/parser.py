# plancarbon/providers/terraform/parser.py
"""
Plan -> {address: Resource}.

1. reference arena: disk images and instance templates, addressed the way
   other resources reference them;
2. every type of the mapping table, through its provider resolver when one is
   registered, else through the generic extractor;
3. every other managed resource of the plan is reported Unsupported, unless
   its provider ignores that type.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Union

from plancarbon.errors import ConfigurationError, UnknownProviderError
from plancarbon.query import query
from plancarbon.schema.coefficients import CoefficientsProviders
from plancarbon.schema.mapping import ResourceMapping
from plancarbon.schema.provider import Provider, parse_provider
from plancarbon.schema.resource import Resource, ResourceIdentification, UnsupportedResource

from .address import address_module_part, format_index
from .context import ParserContext, PlanScope
from .extractor import ExtractionContext, extract_compute_resource
from .plan import Plan
from .references import ReferenceResolver
from .resource_registry import get_data_resource_registry, get_resource_registry, get_template_types

__all__ = ["parse_plan_json"]

log = logging.getLogger(__name__)


def _provider_of(raw: Dict[str, Any]) -> Optional[Provider]:
    try:
        return parse_provider(raw.get("provider_name") or "")
    except UnknownProviderError:
        return None


def _mapped_resources(plan: Plan, mapping: ResourceMapping) -> Iterator[Dict[str, Any]]:
    for path in mapping.paths:
        for match in query(plan.raw, path):
            for node in match if isinstance(match, list) else [match]:
                if isinstance(node, dict):
                    yield node


def _unsupported(raw: Dict[str, Any], provider: Provider) -> UnsupportedResource:
    address = raw.get("address") or ""
    return UnsupportedResource(
        identification=ResourceIdentification(
            name=f"{raw.get('name') or ''}{format_index(raw.get('index'))}",
            resource_type=raw.get("type") or "",
            provider=provider,
            module_address=address_module_part(address),
        )
    )


def _check_coefficients(resources: Dict[str, Resource], coefficients: CoefficientsProviders) -> None:
    providers = {r.identification.provider for r in resources.values() if r.is_supported()}
    for provider in sorted(providers, key=lambda p: p.value):
        try:
            coefficients.by_provider(provider)
        except ConfigurationError as e:
            log.warning("%s, its compute resources cannot be estimated", e)


def parse_plan_json(
    plan: Union[str, bytes, Dict[str, Any], Plan], context: Optional[ParserContext] = None
) -> Dict[str, Resource]:
    context = context or ParserContext.default()
    plan = Plan.from_json(plan)

    if not plan.has_planned_values():
        log.warning("Plan has no planned values, no resource to read")
        return {}

    references = ReferenceResolver.from_plan(plan, get_data_resource_registry(), get_template_types())
    scope = PlanScope(plan=plan, references=references, context=context)
    registry = get_resource_registry()

    resources: Dict[str, Resource] = {}

    # ---- mapped types ----
    for resource_type, mapping in context.mappings.compute_resource.items():
        for raw in _mapped_resources(plan, mapping):
            address = raw.get("address") or ""
            if address in resources:
                continue
            provider = _provider_of(raw)
            if provider is None:
                log.debug("Skipping %s: unknown provider %r", address, raw.get("provider_name"))
                continue

            rtype = raw.get("type") or resource_type
            resolver = registry.get(rtype)
            log.debug("Reading %s (%s)", address, "resolver" if resolver else "mapping")
            if resolver is not None:
                resource = resolver(plan.config_resource(raw), scope)
            else:
                resource = extract_compute_resource(ExtractionContext(address, mapping, raw, provider))
            if resource is None:
                continue
            resources[address or resource.address] = resource

    # ---- everything else ----
    for raw in plan.planned_resources():
        if (raw.get("mode") or "managed") != "managed":
            continue
        address = raw.get("address") or ""
        if address in resources:
            continue
        provider = _provider_of(raw)
        if provider is None:
            log.debug("Skipping %s: unknown provider %r", address, raw.get("provider_name"))
            continue
        if context.mappings.is_ignored(raw.get("type") or "", provider):
            log.debug("Ignoring %s", address)
            continue
        resource = _unsupported(raw, provider)
        resources[address or resource.address] = resource

    _check_coefficients(resources, context.coefficients)
    log.info("Read %d resources from plan", len(resources))
    return resources
