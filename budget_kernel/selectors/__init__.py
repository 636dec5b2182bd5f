"""Selectors for the budget kernel (read side)."""

from budget_kernel.selectors.record_selector import RecordSelector
from budget_kernel.selectors.summary_selector import SummarySelector

__all__ = [
    "RecordSelector",
    "SummarySelector",
]
