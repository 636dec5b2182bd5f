"""
Module: budget_kernel.models.fund
Responsibility: ORM persistence for Funds, the budget pools at the top of
    the hierarchy.  A Fund is identified by its caller-supplied code.
Architecture position: Kernel > Models.  May import from db/ and
    domain/values.py only.

Invariants enforced:
    - code is unique (uq_fund_code) and never changes after INSERT.
      Programs reference it through Program.fund_code.

Failure modes:
    - IntegrityError on duplicate code (surfaced as DuplicateKeyError by
      EntityStore).
"""

from decimal import Decimal

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import RecordedBase
from budget_kernel.domain.values import CODE_MAX_LENGTH, NAME_MAX_LENGTH, TEXT_MAX_LENGTH


class Fund(RecordedBase):
    """
    A budget pool for one fiscal year with a total ceiling.

    Guarantees:
        - code is unique among Funds.
        - total_budget is a non-negative amount (checked before INSERT).
    """

    __tablename__ = "funds"

    __table_args__ = (
        UniqueConstraint("code", name="uq_fund_code"),
    )

    code: Mapped[str] = mapped_column(String(CODE_MAX_LENGTH), nullable=False)

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    fiscal_year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_budget: Mapped[Decimal] = mapped_column(nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Fund {self.code}: {self.name} (FY{self.fiscal_year})>"
