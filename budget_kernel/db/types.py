"""
Module: budget_kernel.db.types
Responsibility: Column types shared by every model.  Amounts are persisted
    as integer minor units (cents) so stored values never drift.
Architecture position: Kernel > DB.  May import domain/values.py (pure money
    helpers).  MUST NOT import from models/, services/, or selectors/.

Invariants enforced:
    - round_money() from domain/values.py is the only rounding applied on
      the way into the store.
    CRITICAL: No floats anywhere in the kernel.

Failure modes:
    - ValueError from AmountMinorUnits when a bound value is not a Decimal
      or int (commands convert inputs before they reach the ORM).
"""

from decimal import Decimal

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

from budget_kernel.domain.values import money_from_minor_units, money_to_minor_units


class AmountMinorUnits(TypeDecorator):
    """
    Decimal amount stored as BIGINT minor units.

    Contract:
        Transparently converts between Python Decimal amounts and integer
        cents.

    Guarantees:
        - process_bind_param: Decimal -> int cents on INSERT.
        - process_result_value: int cents -> Decimal on SELECT.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
            raise ValueError(
                f"Amount must be Decimal, not {type(value).__name__}"
            )
        return money_to_minor_units(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return money_from_minor_units(int(value))
