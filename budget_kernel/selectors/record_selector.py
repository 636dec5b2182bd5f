"""
Module: budget_kernel.selectors.record_selector
Responsibility: Read-only access to ledger records: ordered listing by kind
    and point lookups used by the consistency validator.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/base.py.

Invariants enforced:
    - Lists are ordered by seq ASC, i.e. insertion order.  Two reads with no
      intervening create return identical sequences.
    - ORM rows are converted to frozen DTOs before leaving this module.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from budget_kernel.domain.dtos import (
    AgencyInfo,
    AllocationInfo,
    DisbursementInfo,
    FundInfo,
    ProgramInfo,
    RecordInfo,
)
from budget_kernel.domain.values import (
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
)
from budget_kernel.models import Agency, Allocation, Disbursement, Fund, Program
from budget_kernel.selectors.base import BaseSelector

MODEL_BY_KIND = {
    EntityKind.FUND: Fund,
    EntityKind.AGENCY: Agency,
    EntityKind.PROGRAM: Program,
    EntityKind.ALLOCATION: Allocation,
    EntityKind.DISBURSEMENT: Disbursement,
}


def _utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def fund_to_dto(row: Fund) -> FundInfo:
    return FundInfo(
        id=row.id,
        seq=row.seq,
        code=row.code,
        name=row.name,
        fiscal_year=row.fiscal_year,
        total_budget=row.total_budget,
        description=row.description,
        created_at=_utc(row.created_at),
    )


def agency_to_dto(row: Agency) -> AgencyInfo:
    return AgencyInfo(
        id=row.id,
        seq=row.seq,
        code=row.code,
        name=row.name,
        description=row.description,
        created_at=_utc(row.created_at),
    )


def program_to_dto(row: Program) -> ProgramInfo:
    return ProgramInfo(
        id=row.id,
        seq=row.seq,
        code=row.code,
        name=row.name,
        fund_code=row.fund_code,
        agency_code=row.agency_code,
        allocated_amount=row.allocated_amount,
        description=row.description,
        created_at=_utc(row.created_at),
    )


def allocation_to_dto(row: Allocation) -> AllocationInfo:
    return AllocationInfo(
        id=row.id,
        seq=row.seq,
        program_code=row.program_code,
        amount=row.amount,
        allocation_date=row.allocation_date,
        status=AllocationStatus(row.status),
        notes=row.notes,
        created_at=_utc(row.created_at),
    )


def disbursement_to_dto(row: Disbursement) -> DisbursementInfo:
    return DisbursementInfo(
        id=row.id,
        seq=row.seq,
        allocation_id=row.allocation_id,
        amount=row.amount,
        disbursement_date=row.disbursement_date,
        recipient=row.recipient,
        status=DisbursementStatus(row.status),
        notes=row.notes,
        created_at=_utc(row.created_at),
    )


DTO_BY_KIND = {
    EntityKind.FUND: fund_to_dto,
    EntityKind.AGENCY: agency_to_dto,
    EntityKind.PROGRAM: program_to_dto,
    EntityKind.ALLOCATION: allocation_to_dto,
    EntityKind.DISBURSEMENT: disbursement_to_dto,
}


def to_dto(kind: EntityKind, row) -> RecordInfo:
    """Convert an ORM row of *kind* to its DTO."""
    return DTO_BY_KIND[kind](row)


def parse_record_id(value: str) -> UUID | None:
    """Parse a system-generated id; None when *value* is not a UUID."""
    try:
        return UUID(str(value))
    except ValueError:
        return None


class RecordSelector(BaseSelector):
    """
    Selector for ledger records.

    Guarantees:
        - list() returns every record of a kind, oldest first.
        - find_*() returns None rather than raising when nothing matches.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def list(self, kind: EntityKind | str) -> list[RecordInfo]:
        """
        All records of *kind* in insertion order.

        Args:
            kind: Entity kind (enum or its string value).

        Returns:
            List of DTOs (empty when the kind has no records).
        """
        kind = EntityKind(kind)
        model = MODEL_BY_KIND[kind]
        rows = self.session.execute(
            select(model).order_by(model.seq)
        ).scalars().all()
        return [to_dto(kind, row) for row in rows]

    def code_exists(self, kind: EntityKind, code: str) -> bool:
        """True when a Fund/Agency/Program with exactly *code* exists."""
        model = MODEL_BY_KIND[kind]
        found = self.session.execute(
            select(model.id).where(model.code == code).limit(1)
        ).first()
        return found is not None

    def find_program(self, code: str) -> ProgramInfo | None:
        row = self.session.execute(
            select(Program).where(Program.code == code)
        ).scalar_one_or_none()
        return program_to_dto(row) if row else None

    def find_allocation(self, allocation_id: UUID | str) -> AllocationInfo | None:
        """Allocation by id; None for unknown or malformed ids."""
        if not isinstance(allocation_id, UUID):
            allocation_id = parse_record_id(allocation_id)
            if allocation_id is None:
                return None
        row = self.session.get(Allocation, allocation_id)
        return allocation_to_dto(row) if row else None
