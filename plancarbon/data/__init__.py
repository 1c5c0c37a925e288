# plancarbon/data/__init__.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from plancarbon.errors import ConfigurationError

__all__ = ["read_data_file", "load_json_data"]

log = logging.getLogger(__name__)

_EMBEDDED_DIR = Path(__file__).resolve().parent


def read_data_file(filename: str, data_path: Optional[str] = None) -> bytes:
    """
    Read a data file, preferring <data_path>/<filename> when it exists and
    falling back to the copy shipped with the package.
    """
    if data_path:
        override = Path(data_path) / filename
        if override.is_file():
            log.debug("  reading datafile '%s' from: %s", filename, override)
            return override.read_bytes()

    embedded = _EMBEDDED_DIR / filename
    if not embedded.is_file():
        raise ConfigurationError(f"data file not found: {filename}")
    log.debug("  reading datafile '%s' embedded", filename)
    return embedded.read_bytes()


def load_json_data(filename: str, data_path: Optional[str] = None) -> Any:
    raw = read_data_file(filename, data_path)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid JSON in data file {filename}: {e}") from e
