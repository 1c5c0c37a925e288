# plancarbon/schema/provider.py
from __future__ import annotations

from enum import Enum

from plancarbon.errors import UnknownProviderError

__all__ = ["Provider", "parse_provider"]


class Provider(Enum):
    AWS = "AWS"
    GCP = "GCP"
    AZURE = "Azure"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Provider":
        key = (name or "").strip().lower()
        for p in cls:
            if p.value.lower() == key:
                return p
        raise UnknownProviderError(f"unknown provider: {name!r}")


# terraform provider source suffix -> provider
_PROVIDER_SUFFIXES = (
    ("google", Provider.GCP),
    ("google-beta", Provider.GCP),
    ("aws", Provider.AWS),
    ("azurerm", Provider.AZURE),
)


def parse_provider(tf_provider_name: str) -> Provider:
    """
    "registry.terraform.io/hashicorp/google" -> GCP
    "registry.terraform.io/hashicorp/aws"    -> AWS
    anything else is parsed as a provider name ("gcp", "aws", "azure").
    """
    for suffix, provider in _PROVIDER_SUFFIXES:
        if tf_provider_name.endswith(suffix):
            return provider
    return Provider.parse(tf_provider_name)
