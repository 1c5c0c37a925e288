# plancarbon/errors.py
from __future__ import annotations

__all__ = [
    "PlanCarbonError",
    "MalformedPlanError",
    "PlanDecodeError",
    "PathSyntaxError",
    "ConfigurationError",
    "UnknownProviderError",
    "TerraformError",
    "ProviderAuthError",
]


class PlanCarbonError(Exception):
    """Base class for every error raised by plancarbon."""


class MalformedPlanError(PlanCarbonError):
    """The plan lacks something a resource cannot be identified without."""


class PlanDecodeError(MalformedPlanError):
    """A configuration expression has a shape terraform never emits."""


class PathSyntaxError(PlanCarbonError):
    pass


class ConfigurationError(PlanCarbonError):
    """
    Mapping table, catalog or settings are broken (unknown unit, unknown disk
    type, unknown tier...). These are never recovered from inside the parser.
    """


class UnknownProviderError(PlanCarbonError):
    pass


class TerraformError(PlanCarbonError):
    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class ProviderAuthError(TerraformError):
    """terraform plan failed because the provider credentials are missing or invalid."""
