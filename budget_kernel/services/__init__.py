"""Services for the budget kernel (write side)."""

from budget_kernel.services.budget_ledger import BudgetLedger
from budget_kernel.services.consistency_validator import ConsistencyValidator
from budget_kernel.services.entity_store import EntityStore
from budget_kernel.services.sequence_service import SequenceService

__all__ = [
    "BudgetLedger",
    "ConsistencyValidator",
    "EntityStore",
    "SequenceService",
]
