"""
Module: budget_kernel.models.allocation
Responsibility: ORM persistence for Allocations (obligations against a
    Program) and Disbursements (payments against an Allocation).
Architecture position: Kernel > Models.  May import from db/ and
    domain/values.py only.

Invariants enforced:
    - Identity is the system-generated UUID primary key.  Callers never
      supply it.
    - Allocation.program_code and Disbursement.allocation_id resolve to
      existing rows (validator first, foreign key as backstop).
    - status is recorded once; there are no status transitions.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import RecordedBase, UUIDString
from budget_kernel.domain.values import (
    CODE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    AllocationStatus,
    DisbursementStatus,
)


class Allocation(RecordedBase):
    """An obligation of money from a Program's budget, dated and statused."""

    __tablename__ = "allocations"

    __table_args__ = (
        Index("idx_allocation_program", "program_code"),
        Index("idx_allocation_status", "status"),
    )

    program_code: Mapped[str] = mapped_column(
        String(CODE_MAX_LENGTH),
        ForeignKey("programs.code"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    allocation_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[AllocationStatus] = mapped_column(
        String(20),
        nullable=False,
        default=AllocationStatus.APPROVED,
    )

    notes: Mapped[str | None] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Allocation {self.id}: {self.program_code} {self.amount} ({self.status})>"


class Disbursement(RecordedBase):
    """An actual payment event against a specific Allocation."""

    __tablename__ = "disbursements"

    __table_args__ = (
        Index("idx_disbursement_allocation", "allocation_id"),
        Index("idx_disbursement_status", "status"),
    )

    allocation_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("allocations.id"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    disbursement_date: Mapped[date] = mapped_column(Date, nullable=False)

    recipient: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        default="",
    )

    status: Mapped[DisbursementStatus] = mapped_column(
        String(20),
        nullable=False,
        default=DisbursementStatus.SENT,
    )

    notes: Mapped[str | None] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Disbursement {self.id}: {self.allocation_id} {self.amount} ({self.status})>"
