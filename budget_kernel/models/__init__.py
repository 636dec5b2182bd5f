"""ORM models for the budget kernel."""

from budget_kernel.models.agency import Agency
from budget_kernel.models.allocation import Allocation, Disbursement
from budget_kernel.models.fund import Fund
from budget_kernel.models.program import Program

__all__ = [
    "Fund",
    "Agency",
    "Program",
    "Allocation",
    "Disbursement",
]
