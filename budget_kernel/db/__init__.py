"""Database layer - engine, base classes and column types."""

from budget_kernel.db.base import UUID, Base, RecordedBase, UUIDString
from budget_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    session_scope,
)
from budget_kernel.db.types import AmountMinorUnits

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "RecordedBase",
    "UUIDString",
    "UUID",
    "AmountMinorUnits",
]
