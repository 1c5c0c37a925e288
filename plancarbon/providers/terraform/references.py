# plancarbon/providers/terraform/references.py
"""
Address-indexed arena of the resources compute resources point at: disk images
(data resources) and instance templates. Built before any compute resource is
resolved, read-only afterwards.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, Iterable, Mapping, Optional

from plancarbon.schema.resource import DataImageResource

from .address import strip_address_array
from .plan import ConfigResource, Plan

__all__ = ["ReferenceResolver", "DataResourceFunc"]

log = logging.getLogger(__name__)

DataResourceFunc = Callable[[Dict], Optional[DataImageResource]]


class ReferenceResolver:
    def __init__(
        self,
        data_resources: Optional[Mapping[str, DataImageResource]] = None,
        templates: Optional[Mapping[str, ConfigResource]] = None,
    ) -> None:
        self._data: Dict[str, DataImageResource] = dict(data_resources or {})
        self._templates: Dict[str, ConfigResource] = dict(templates or {})

    @classmethod
    def from_plan(
        cls,
        plan: Plan,
        data_registry: Mapping[str, DataResourceFunc],
        template_types: Iterable[str],
    ) -> "ReferenceResolver":
        data: Dict[str, DataImageResource] = {}
        for raw in plan.resources_of_types(data_registry.keys()):
            resource = data_registry[raw.get("type")](raw)
            if resource is None:
                continue
            key = strip_address_array(raw.get("address") or resource.address)
            data.setdefault(key, resource)
        templates = plan.config_resources_of_types(template_types)
        log.debug("Reference arena: %d data resources, %d templates", len(data), len(templates))
        return cls(data, templates)

    def data_resource(self, references: Iterable[str]) -> Optional[DataImageResource]:
        for ref in references:
            found = self._data.get(strip_address_array(ref))
            if found is not None:
                return found
        return None

    def template(self, references: Iterable[str]) -> Optional[ConfigResource]:
        """First referenced template; "<template>.id" references point back at ids, not templates."""
        for ref in references:
            if ref.endswith(".id"):
                continue
            found = self._templates.get(strip_address_array(ref))
            if found is not None:
                return found
        return None

    def image_size_gb(
        self, resource_address: str, references: Iterable[str], default: Decimal
    ) -> Decimal:
        refs = list(references)
        image = self.data_resource(refs)
        if image is None:
            log.warning(
                "%s : Disk image %s not found in plan, considering it default to be %sGb",
                resource_address,
                ", ".join(refs) or "(no reference)",
                default,
            )
            return default
        if image.disk_size_gb is None:
            log.warning(
                "%s : Disk image %s does not have a size declared, considering it default to be %sGb",
                resource_address,
                image.address,
                default,
            )
            return default
        return image.disk_size_gb
