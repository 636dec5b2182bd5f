"""
Budget ledger Django HTTP adapter.
Thin framework glue over budget_kernel.BudgetLedger.
"""

from budget_api.wiring import build_ledger, reset_ledger, set_ledger

__all__ = [
    "build_ledger",
    "reset_ledger",
    "set_ledger",
]
