"""
budget_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables.

Architecture position:
    Configuration -- sits beside ``budget_api`` and the scripts.  The kernel
    MUST NEVER import from ``budget_config``; it receives plain values.

Failure modes:
    - ``FileNotFoundError`` -- the requested config file does not exist.
    - ``ConfigError`` (a ``ValueError``) -- unknown keys or bad values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from budget_config.loader import (
    DATABASE_URL_ENV,
    apply_environment,
    load_yaml_file,
    parse_config,
)
from budget_config.schema import ConfigError, LedgerConfig

_logger = logging.getLogger("budget_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "default.yaml"


def get_active_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> LedgerConfig:
    """The ONLY public configuration entrypoint.

    The bundled ``sets/default.yaml`` supplies every default.  A file at
    *config_path* is layered over it, then ``BUDGET_LEDGER_DATABASE_URL``
    overrides ``database_url``.

    Args:
        config_path: Optional YAML file with overrides.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        LedgerConfig.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        ConfigError: If a file has unknown keys or wrongly typed values.
    """
    defaults = load_yaml_file(DEFAULT_CONFIG_PATH)
    config = parse_config(defaults)
    if config_path is not None:
        config = parse_config(load_yaml_file(Path(config_path)), base=defaults)

    config = apply_environment(config, os.environ if environ is None else environ)

    _logger.info(
        "config_loaded",
        extra={
            "database_url": config.redacted_url(),
            "strict_caps": config.strict_caps,
            "exclude_rejected_allocations": config.exclude_rejected_allocations,
        },
    )
    return config


__all__ = [
    "ConfigError",
    "DATABASE_URL_ENV",
    "LedgerConfig",
    "get_active_config",
]
