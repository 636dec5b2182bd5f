"""
Configuration Loader (``budget_config.loader``).

Responsibility
--------------
Reads YAML configuration files and parses them into ``LedgerConfig``.
Callers use ``budget_config.get_active_config()``; this module is its
implementation.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or wrong types  -> ``ConfigError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from budget_config.schema import ConfigError, LedgerConfig

DATABASE_URL_ENV = "BUDGET_LEDGER_DATABASE_URL"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def parse_config(
    data: Mapping[str, Any],
    base: Mapping[str, Any] | None = None,
) -> LedgerConfig:
    """
    Build a LedgerConfig from *data* layered over *base*.

    Raises:
        ConfigError: unknown keys, or values of the wrong type.
    """
    unknown = set(data) - LedgerConfig.field_names()
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
    merged = dict(base or {})
    merged.update(data)
    if "database_url" not in merged:
        raise ConfigError("database_url is required")
    return LedgerConfig(**merged)


def apply_environment(
    config: LedgerConfig,
    environ: Mapping[str, str],
) -> LedgerConfig:
    """Override database_url from the environment when set."""
    url = environ.get(DATABASE_URL_ENV)
    if not url:
        return config
    values = config.as_dict()
    values["database_url"] = url
    return LedgerConfig(**values)
