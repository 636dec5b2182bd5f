"""
Module: budget_kernel.models.program
Responsibility: ORM persistence for Programs, the spending initiatives that
    join one Fund to one Agency and receive Allocations.
Architecture position: Kernel > Models.  May import from db/ and
    domain/values.py only.

Invariants enforced:
    - code is unique (uq_program_code).
    - fund_code and agency_code resolve to existing rows.  The validator
      checks this before INSERT; the foreign keys are the database backstop
      on backends that enforce them.

Failure modes:
    - IntegrityError on duplicate code or (PostgreSQL) unknown parent code.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import RecordedBase
from budget_kernel.domain.values import CODE_MAX_LENGTH, NAME_MAX_LENGTH, TEXT_MAX_LENGTH


class Program(RecordedBase):
    """
    A spending initiative tied to exactly one Fund and one Agency.

    Contract:
        allocated_amount is the nominal, declared budget of the program.
        It is NOT derived from Allocations and is not reconciled against
        them unless strict caps are enabled.
    """

    __tablename__ = "programs"

    __table_args__ = (
        UniqueConstraint("code", name="uq_program_code"),
        Index("idx_program_fund", "fund_code"),
        Index("idx_program_agency", "agency_code"),
    )

    code: Mapped[str] = mapped_column(String(CODE_MAX_LENGTH), nullable=False)

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    fund_code: Mapped[str] = mapped_column(
        String(CODE_MAX_LENGTH),
        ForeignKey("funds.code"),
        nullable=False,
    )

    agency_code: Mapped[str] = mapped_column(
        String(CODE_MAX_LENGTH),
        ForeignKey("agencies.code"),
        nullable=False,
    )

    allocated_amount: Mapped[Decimal] = mapped_column(nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Program {self.code}: {self.name} ({self.fund_code}/{self.agency_code})>"
