# plancarbon/schema/coefficients.py
from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, Optional

from plancarbon.data import load_json_data
from plancarbon.errors import ConfigurationError
from plancarbon.schema.provider import Provider
from plancarbon.schema.value import to_decimal

__all__ = ["EnergyCoefficients", "CoefficientsProviders", "parse_coefficients", "load_coefficients"]

ENERGY_COEFFICIENTS_FILE = "energy_coefficients.json"


@dataclass(frozen=True)
class EnergyCoefficients:
    cpu_min_wh: Decimal
    cpu_max_wh: Decimal
    storage_hdd_wh_tb: Decimal
    storage_ssd_wh_tb: Decimal
    networking_wh_gb: Decimal
    memory_wh_gb: Decimal
    pue_average: Decimal


@dataclass(frozen=True)
class CoefficientsProviders:
    by_provider_map: Dict[Provider, EnergyCoefficients]

    def by_provider(self, provider: Provider) -> EnergyCoefficients:
        try:
            return self.by_provider_map[provider]
        except KeyError:
            raise ConfigurationError(f"no energy coefficients for provider {provider}") from None


def _coefficients(provider: str, raw: Any) -> EnergyCoefficients:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{ENERGY_COEFFICIENTS_FILE}: {provider} must be an object")
    values = {}
    for f in fields(EnergyCoefficients):
        d = to_decimal(raw.get(f.name))
        if d is None:
            raise ConfigurationError(f"{ENERGY_COEFFICIENTS_FILE}: {provider}.{f.name} missing or not a number")
        values[f.name] = d
    return EnergyCoefficients(**values)


def parse_coefficients(raw: Dict[str, Any]) -> CoefficientsProviders:
    out: Dict[Provider, EnergyCoefficients] = {}
    for provider in Provider:
        if provider.value in (raw or {}):
            out[provider] = _coefficients(provider.value, raw[provider.value])
    return CoefficientsProviders(by_provider_map=out)


@lru_cache(maxsize=None)
def load_coefficients(data_path: Optional[str] = None) -> CoefficientsProviders:
    return parse_coefficients(load_json_data(ENERGY_COEFFICIENTS_FILE, data_path))
