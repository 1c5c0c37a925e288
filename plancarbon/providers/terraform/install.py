# plancarbon/providers/terraform/install.py
"""
Download terraform from releases.hashicorp.com when it is not installed.
"""
from __future__ import annotations

import io
import logging
import os
import platform
import stat
import zipfile
from pathlib import Path
from typing import Optional

import requests

from plancarbon.errors import TerraformError

log = logging.getLogger(__name__)

CHECKPOINT_URL = "https://checkpoint-api.hashicorp.com/v1/check/terraform"
RELEASES_URL = "https://releases.hashicorp.com/terraform"
HTTP_TIMEOUT = 60

_ARCHES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "armv7l": "arm",
}


def latest_version() -> str:
    try:
        resp = requests.get(CHECKPOINT_URL, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
        version = resp.json().get("current_version")
    except (requests.RequestException, ValueError) as e:
        raise TerraformError(f"cannot find the latest terraform version: {e}") from e
    if not version:
        raise TerraformError("cannot find the latest terraform version: empty answer")
    return str(version)


def release_url(version: str, system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """https://releases.hashicorp.com/terraform/1.6.2/terraform_1.6.2_linux_amd64.zip"""
    os_name = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    arch = _ARCHES.get(machine)
    if arch is None:
        raise TerraformError(f"no terraform release for architecture {machine!r}")
    return f"{RELEASES_URL}/{version}/terraform_{version}_{os_name}_{arch}.zip"


def install_terraform(version: Optional[str], install_dir: str) -> str:
    """Install terraform `version` (latest when None) in install_dir, return the binary path."""
    version = (version or latest_version()).lstrip("v")
    url = release_url(version)
    log.info("Downloading terraform %s from %s", version, url)
    try:
        resp = requests.get(url, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TerraformError(f"cannot download terraform {version}: {e}") from e

    binary_name = "terraform.exe" if platform.system().lower() == "windows" else "terraform"
    target_dir = Path(install_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / binary_name
    try:
        with zipfile.ZipFile(io.BytesIO(resp.content)) as archive:
            target.write_bytes(archive.read(binary_name))
    except (zipfile.BadZipFile, KeyError) as e:
        raise TerraformError(f"unexpected terraform archive {url}: {e}") from e

    mode = os.stat(target).st_mode
    os.chmod(target, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    log.info("terraform %s installed at %s", version, target)
    return str(target)
