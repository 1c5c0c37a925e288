# plancarbon/providers/terraform/context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from plancarbon.config import Config, load_config
from plancarbon.schema.catalog import Catalogs, load_catalogs
from plancarbon.schema.coefficients import CoefficientsProviders, load_coefficients
from plancarbon.schema.mapping import Mappings, load_mappings

if TYPE_CHECKING:
    from .plan import Plan
    from .references import ReferenceResolver

__all__ = ["ParserContext", "PlanScope"]


@dataclass(frozen=True)
class ParserContext:
    """Read-only state shared by every parse: settings, mapping table, catalogs, energy coefficients."""

    config: Config
    mappings: Mappings
    catalogs: Catalogs
    coefficients: CoefficientsProviders

    @classmethod
    def default(cls, config: Optional[Config] = None) -> "ParserContext":
        cfg = config or load_config()
        return cls(
            config=cfg,
            mappings=load_mappings(cfg.data_path),
            catalogs=load_catalogs(cfg.data_path),
            coefficients=load_coefficients(cfg.data_path),
        )


@dataclass(frozen=True)
class PlanScope:
    """What a resolver may look at while resolving one resource of one plan."""

    plan: "Plan"
    references: "ReferenceResolver"
    context: ParserContext

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def catalogs(self) -> Catalogs:
        return self.context.catalogs

    def provider_setting(self, provider_name: str, key: str) -> Any:
        """Constant from a provider block, e.g. provider "google" { zone = "..." }."""
        return self.plan.provider_config(provider_name).constant(key)
