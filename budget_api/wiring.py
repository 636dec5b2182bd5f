"""
Budget Ledger Django Adapter Wiring
===================================
Builds the BudgetLedger the views talk to.

Adapter-only glue: the ledger is built once from get_active_config() on
first use.  Tests inject their own with set_ledger().
"""

from __future__ import annotations

import threading

from budget_config import get_active_config
from budget_kernel.logging_config import configure_logging
from budget_kernel.services.budget_ledger import BudgetLedger

_LEDGER_LOCK = threading.Lock()
_LEDGER: BudgetLedger | None = None


def _create_ledger() -> BudgetLedger:
    config = get_active_config()
    configure_logging(level=config.log_level.upper())
    return BudgetLedger.from_config(config)


def build_ledger() -> BudgetLedger:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _LEDGER
    with _LEDGER_LOCK:
        if _LEDGER is None:
            _LEDGER = _create_ledger()
        return _LEDGER


def set_ledger(ledger: BudgetLedger) -> None:
    global _LEDGER
    with _LEDGER_LOCK:
        _LEDGER = ledger


def reset_ledger() -> None:
    global _LEDGER
    with _LEDGER_LOCK:
        _LEDGER = None
