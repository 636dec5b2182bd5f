"""
Module: budget_kernel.selectors.summary_selector
Responsibility: Compute the ledger Summary from stored records at query time.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/base.py.

Invariants enforced:
    - The Summary is derived, never stored.  Every figure is an aggregate
      over the current rows.
    - Sums are exact and unbounded: stored cents are added as Decimal in
      Python.  SQL SUM over BIGINT overflows on SQLite once enough large
      amounts accumulate.
    - by_program groups allocations by program_code, including codes with
      no matching Program row.

Failure modes:
    - None raised here; driver failures surface through session_scope().
"""

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from budget_kernel.domain.summary import ProgramAllocation, Summary, sort_by_program
from budget_kernel.domain.values import (
    ZERO,
    AllocationStatus,
    DisbursementStatus,
)
from budget_kernel.logging_config import get_logger
from budget_kernel.models import Allocation, Disbursement, Fund
from budget_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.summary")


def _total(amounts) -> Decimal:
    """Exact Decimal sum of *amounts*; ZERO when there are none."""
    return sum(amounts, ZERO)


class SummarySelector(BaseSelector):
    """
    Selector for the dashboard summary.

    Args:
        session: Caller-owned session.  Call summarize() inside one
            transaction to get a consistent snapshot.
        exclude_rejected: Leave rejected allocations out of total_allocated
            and by_program.
    """

    def __init__(self, session: Session, exclude_rejected: bool = False):
        super().__init__(session)
        self._exclude_rejected = exclude_rejected

    def _allocation_filter(self, query):
        if self._exclude_rejected:
            query = query.where(Allocation.status != AllocationStatus.REJECTED.value)
        return query

    def total_funds(self) -> int:
        return self.session.execute(select(func.count(Fund.id))).scalar_one()

    def _amounts(self, query) -> Decimal:
        return _total(self.session.execute(query).scalars())

    def total_budget(self) -> Decimal:
        return self._amounts(select(Fund.total_budget))

    def total_allocated(self) -> Decimal:
        return self._amounts(self._allocation_filter(select(Allocation.amount)))

    def total_disbursed(self) -> Decimal:
        return self._amounts(select(Disbursement.amount))

    def by_program(self) -> tuple[ProgramAllocation, ...]:
        """Allocated total per program code, largest first."""
        query = self._allocation_filter(
            select(Allocation.program_code, Allocation.amount)
        )
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for program_code, amount in self.session.execute(query):
            totals[program_code] += amount
        return sort_by_program(
            [
                ProgramAllocation(program_code=code, allocated=allocated)
                for code, allocated in totals.items()
            ]
        )

    def summarize(self) -> Summary:
        """
        Compute the full Summary.

        Postconditions:
            - total_funds == number of Fund rows.
            - total_allocated == sum of by_program allocated values.
        """
        summary = Summary(
            total_funds=self.total_funds(),
            total_budget=self.total_budget(),
            total_allocated=self.total_allocated(),
            total_disbursed=self.total_disbursed(),
            by_program=self.by_program(),
        )
        logger.debug(
            "summary_computed",
            extra={
                "total_funds": summary.total_funds,
                "program_count": len(summary.by_program),
            },
        )
        return summary

    # Cap checks

    def program_allocated(self, program_code: str) -> Decimal:
        """Sum of non-rejected allocations recorded against *program_code*."""
        query = select(Allocation.amount).where(
            Allocation.program_code == program_code,
            Allocation.status != AllocationStatus.REJECTED.value,
        )
        return self._amounts(query)

    def allocation_disbursed(self, allocation_id: UUID) -> Decimal:
        """Sum of non-failed disbursements recorded against *allocation_id*."""
        query = select(Disbursement.amount).where(
            Disbursement.allocation_id == allocation_id,
            Disbursement.status != DisbursementStatus.FAILED.value,
        )
        return self._amounts(query)
