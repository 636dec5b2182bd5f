"""
Pure domain layer.

This package contains commands, DTOs, value types and summary logic with
NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Wall-clock time (a Clock is injected)
- I/O

All domain objects are immutable and deterministic.
"""

from budget_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from budget_kernel.domain.commands import (
    CreateAgency,
    CreateAllocation,
    CreateCommand,
    CreateDisbursement,
    CreateFund,
    CreateProgram,
    parse_command,
)
from budget_kernel.domain.dtos import (
    AgencyInfo,
    AllocationInfo,
    DisbursementInfo,
    FundInfo,
    ProgramInfo,
    RecordInfo,
    ValidationResult,
)
from budget_kernel.domain.summary import (
    AllocationBar,
    ProgramAllocation,
    Summary,
    allocation_bars,
)
from budget_kernel.domain.values import (
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
    round_money,
)

__all__ = [
    # Time
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Commands
    "CreateFund",
    "CreateAgency",
    "CreateProgram",
    "CreateAllocation",
    "CreateDisbursement",
    "CreateCommand",
    "parse_command",
    # DTOs
    "FundInfo",
    "AgencyInfo",
    "ProgramInfo",
    "AllocationInfo",
    "DisbursementInfo",
    "RecordInfo",
    "ValidationResult",
    # Summary
    "Summary",
    "ProgramAllocation",
    "AllocationBar",
    "allocation_bars",
    # Values
    "EntityKind",
    "AllocationStatus",
    "DisbursementStatus",
    "round_money",
]
