"""
LedgerConfig schema.

The runtime configuration of a budget ledger deployment.  YAML files are
parsed into this type by the loader; nothing else reads configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from sqlalchemy.engine import make_url


class ConfigError(ValueError):
    """A configuration file has unknown keys or wrongly typed values."""


_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class LedgerConfig:
    """Validated ledger configuration."""

    database_url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    strict_caps: bool = False
    exclude_rejected_allocations: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            expected = {"str": str, "bool": bool, "int": int}[f.type]
            # bool is an int subclass; "pool_size: true" is still a mistake
            if isinstance(value, bool) and expected is int:
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if not isinstance(value, expected):
                raise ConfigError(
                    f"{f.name} must be {expected.__name__}, got {value!r}"
                )
        if not self.database_url.strip():
            raise ConfigError("database_url must not be empty")
        for name in ("pool_size", "max_overflow", "pool_timeout"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log_level: {self.log_level!r}")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def redacted_url(self) -> str:
        """database_url with any password masked, for log output."""
        return make_url(self.database_url).render_as_string(hide_password=True)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
