"""
Summary DTOs and the dashboard bar computation.

The Summary is derived, never stored: SummarySelector rebuilds it from the
store on every request.  Nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

# Rows the dashboard shows in the allocation-by-program chart.
DEFAULT_BAR_LIMIT = 8


@dataclass(frozen=True)
class ProgramAllocation:
    """Sum of Allocation amounts for one program code."""

    program_code: str
    allocated: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"program_code": self.program_code, "allocated": str(self.allocated)}


@dataclass(frozen=True)
class Summary:
    """
    Aggregate view of the ledger.

    Guarantees:
        - by_program is sorted by allocated descending, then program_code
          ascending.
        - Every amount is a Decimal with two places.
    """

    total_funds: int
    total_budget: Decimal
    total_allocated: Decimal
    total_disbursed: Decimal
    by_program: tuple[ProgramAllocation, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_funds": self.total_funds,
            "total_budget": str(self.total_budget),
            "total_allocated": str(self.total_allocated),
            "total_disbursed": str(self.total_disbursed),
            "by_program": [row.to_dict() for row in self.by_program],
        }


def sort_by_program(rows: list[ProgramAllocation]) -> tuple[ProgramAllocation, ...]:
    """Largest allocation first; ties broken by program code."""
    return tuple(sorted(rows, key=lambda r: (-r.allocated, r.program_code)))


@dataclass(frozen=True)
class AllocationBar:
    """One row of the allocation-by-program chart."""

    program_code: str
    allocated: Decimal
    width_percent: Decimal


def allocation_bars(
    summary: Summary,
    limit: int = DEFAULT_BAR_LIMIT,
) -> list[AllocationBar]:
    """
    Top *limit* programs with their bar width relative to the largest.

    The denominator is the largest allocation but never less than 1, so an
    all-zero breakdown renders empty bars instead of dividing by zero.
    Widths are capped at 100 and rounded to one decimal place.
    """
    if not summary.by_program:
        return []
    denominator = max(Decimal(1), max(row.allocated for row in summary.by_program))
    bars = []
    for row in summary.by_program[:limit]:
        width = min(Decimal(100), row.allocated / denominator * 100)
        bars.append(
            AllocationBar(
                program_code=row.program_code,
                allocated=row.allocated,
                width_percent=width.quantize(Decimal("0.1")),
            )
        )
    return bars
