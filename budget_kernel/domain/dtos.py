"""
Data Transfer Objects -- immutable records returned across the kernel boundary.

Responsibility:
    Services and selectors never hand ORM instances to callers.  Every read
    and every successful create returns one of these frozen dataclasses, and
    each knows how to render itself as a JSON-ready dict for the HTTP
    adapter.

Architecture position:
    Kernel > Domain -- pure.  No ORM, no I/O.

Serialization contract (``to_dict``):
    - Decimal amounts -> strings with two decimal places ("1500.00").
    - dates and datetimes -> ISO 8601 strings.
    - UUIDs -> canonical strings.
    - Enums -> their value.
    - Every attribute of the entity plus its identity field.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID

from budget_kernel.domain.values import (
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
)
from budget_kernel.exceptions import LedgerValidationError


def to_jsonable(value: Any) -> Any:
    """Render one attribute value for a JSON body."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


class _RecordMixin:
    """Shared serialization for the record DTOs."""

    def to_dict(self) -> dict[str, Any]:
        return {f.name: to_jsonable(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class FundInfo(_RecordMixin):
    """Immutable DTO for a Fund."""

    id: UUID
    seq: int
    code: str
    name: str
    fiscal_year: int
    total_budget: Decimal
    description: str | None
    created_at: datetime

    kind: ClassVar[EntityKind] = EntityKind.FUND

    @property
    def identity(self) -> str:
        return self.code


@dataclass(frozen=True)
class AgencyInfo(_RecordMixin):
    """Immutable DTO for an Agency."""

    id: UUID
    seq: int
    code: str
    name: str
    description: str | None
    created_at: datetime

    kind: ClassVar[EntityKind] = EntityKind.AGENCY

    @property
    def identity(self) -> str:
        return self.code


@dataclass(frozen=True)
class ProgramInfo(_RecordMixin):
    """Immutable DTO for a Program."""

    id: UUID
    seq: int
    code: str
    name: str
    fund_code: str
    agency_code: str
    allocated_amount: Decimal
    description: str | None
    created_at: datetime

    kind: ClassVar[EntityKind] = EntityKind.PROGRAM

    @property
    def identity(self) -> str:
        return self.code


@dataclass(frozen=True)
class AllocationInfo(_RecordMixin):
    """Immutable DTO for an Allocation.  ``id`` is its identity."""

    id: UUID
    seq: int
    program_code: str
    amount: Decimal
    allocation_date: date
    status: AllocationStatus
    notes: str | None
    created_at: datetime

    kind: ClassVar[EntityKind] = EntityKind.ALLOCATION

    @property
    def identity(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class DisbursementInfo(_RecordMixin):
    """Immutable DTO for a Disbursement.  ``id`` is its identity."""

    id: UUID
    seq: int
    allocation_id: UUID
    amount: Decimal
    disbursement_date: date
    recipient: str
    status: DisbursementStatus
    notes: str | None
    created_at: datetime

    kind: ClassVar[EntityKind] = EntityKind.DISBURSEMENT

    @property
    def identity(self) -> str:
        return str(self.id)


RecordInfo = FundInfo | AgencyInfo | ProgramInfo | AllocationInfo | DisbursementInfo


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one create command.

    Contract:
        Either valid (``error`` is None) or invalid with exactly one error --
        the first rule that failed.

    Guarantees:
        - bool(result) == result.is_valid for convenience.
    """

    is_valid: bool
    error: LedgerValidationError | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def failure(cls, error: LedgerValidationError) -> ValidationResult:
        return cls(is_valid=False, error=error)

    def raise_for_error(self) -> None:
        """Re-raise the captured error, if any."""
        if self.error is not None:
            raise self.error

    def __bool__(self) -> bool:
        return self.is_valid
