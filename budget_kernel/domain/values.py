"""
Value types shared by the domain, the models and the API: entity kinds,
statuses, and the money helpers every layer uses for amounts.

Pure: no ORM, no I/O.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class EntityKind(str, Enum):
    """The five ledger record kinds, in hierarchy order."""

    FUND = "fund"
    AGENCY = "agency"
    PROGRAM = "program"
    ALLOCATION = "allocation"
    DISBURSEMENT = "disbursement"

    @property
    def plural(self) -> str:
        if self is EntityKind.AGENCY:
            return "agencies"
        return f"{self.value}s"

    @property
    def has_code(self) -> bool:
        """True for kinds identified by a caller-supplied code."""
        return self in (EntityKind.FUND, EntityKind.AGENCY, EntityKind.PROGRAM)


class AllocationStatus(str, Enum):
    """Allocation status.  Never transitions; recorded once at creation."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class DisbursementStatus(str, Enum):
    """Disbursement status.  Never transitions; recorded once at creation."""

    SENT = "sent"
    SCHEDULED = "scheduled"
    FAILED = "failed"


# Longest text each column accepts; parse_command enforces the same limits.
CODE_MAX_LENGTH = 50
NAME_MAX_LENGTH = 255
TEXT_MAX_LENGTH = 4000


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

# Rounding constants
MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

_MINOR_UNIT_FACTOR = Decimal(10) ** MONEY_DECIMAL_PLACES
_QUANTUM = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)

ZERO = Decimal("0").quantize(_QUANTUM)


def round_money(value: Decimal, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    """
    Round a monetary value to MONEY_DECIMAL_PLACES.

    This is the ONLY sanctioned rounding function for amounts.  All other
    code MUST delegate rounding here.

    Preconditions: value is a finite Decimal.
    Postconditions: Returns value quantized to 2 decimal places.
    """
    return value.quantize(_QUANTUM, rounding=rounding)


def money_to_minor_units(value: Decimal) -> int:
    """
    Convert a Decimal amount to integer minor units.

    Example:
        money_to_minor_units(Decimal("10.50")) -> 1050
    """
    return int(round_money(value) * _MINOR_UNIT_FACTOR)


def money_from_minor_units(value: int) -> Decimal:
    """
    Convert integer minor units back to a Decimal amount.

    Example:
        money_from_minor_units(1050) -> Decimal("10.50")
    """
    return round_money(Decimal(value) / _MINOR_UNIT_FACTOR)
