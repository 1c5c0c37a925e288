# plancarbon/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from plancarbon.errors import ConfigurationError
from plancarbon.schema.value import to_decimal

# ---------------- tiny helpers ----------------

def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    d = to_decimal(raw)
    if d is None:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    return d


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _default_install_dir() -> str:
    return str(Path.home() / ".plancarbon" / "bin")

# ---------------- config model ----------------

@dataclass(frozen=True)
class Config:
    workdir: str = "."
    terraform_binary: str = "terraform"
    terraform_version: str = ""          # empty -> latest release
    terraform_install_dir: str = ""
    data_path: Optional[str] = None      # directory overriding the embedded data files
    no_color: bool = False
    log_level: str = "WARN"

    # GCP disks without explicit type/size
    gcp_boot_disk_size_gb: Decimal = Decimal(10)
    gcp_boot_disk_type: str = "pd-balanced"
    gcp_disk_size_gb: Decimal = Decimal(500)
    gcp_disk_type: str = "pd-standard"

    # AWS block devices without explicit size
    aws_volume_size_gb: Decimal = Decimal(8)

    def with_overrides(self, **overrides: Any) -> "Config":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(**overrides: Any) -> Config:
    """
    Build the process configuration.

    Precedence:
      1) explicit keyword overrides (CLI)
      2) environment (including .env.local, then .env in the working directory)
      3) defaults
    """
    load_dotenv(".env.local")
    load_dotenv(".env")

    cfg = Config(
        workdir=_env("PLANCARBON_WORKDIR", "."),
        terraform_binary=_env("TERRAFORM_BINARY", "terraform"),
        terraform_version=_env("PLANCARBON_TERRAFORM_VERSION"),
        terraform_install_dir=_env("PLANCARBON_TERRAFORM_INSTALL_DIR", _default_install_dir()),
        data_path=_env("PLANCARBON_DATA_PATH") or None,
        no_color=_env_flag("NO_COLOR"),
        log_level=_env("PLANCARBON_LOG_LEVEL", "WARN").upper(),
        gcp_boot_disk_size_gb=_env_decimal("PLANCARBON_GCP_BOOT_DISK_SIZE", Decimal(10)),
        gcp_boot_disk_type=_env("PLANCARBON_GCP_BOOT_DISK_TYPE", "pd-balanced"),
        gcp_disk_size_gb=_env_decimal("PLANCARBON_GCP_DISK_SIZE", Decimal(500)),
        gcp_disk_type=_env("PLANCARBON_GCP_DISK_TYPE", "pd-standard"),
        aws_volume_size_gb=_env_decimal("PLANCARBON_AWS_VOLUME_SIZE", Decimal(8)),
    )
    return cfg.with_overrides(**overrides)
