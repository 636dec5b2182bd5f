"""
Typed Exception Hierarchy for the Budget Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger (the HTTP adapter, scripts, tests) must tell a
rejected command apart from a broken store without parsing messages.
Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        ledger.create_program(payload)
    except DanglingReferenceError as e:
        api_response(code=e.code, field=e.field, value=e.value)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BudgetKernelError (base)
    |
    +-- LedgerValidationError
    |   +-- MissingFieldError
    |   +-- InvalidAmountError
    |   +-- InvalidFieldError
    |   +-- DanglingReferenceError
    |   +-- DuplicateKeyError
    |   +-- CapExceededError
    |
    +-- StoreError
        +-- StoreUnavailableError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                | When Raised
------------|---------------------|---------------------------------------------
Validation  | MISSING_FIELD       | Required field absent or blank
            | INVALID_AMOUNT      | Amount not a non-negative number
            | INVALID_FIELD       | Bad fiscal year, date or status value
            | DANGLING_REFERENCE  | Referenced Fund/Agency/Program/Allocation
            |                     | does not exist
            | DUPLICATE_KEY       | Code already used within its entity kind
            | CAP_EXCEEDED        | Strict mode: child amounts exceed parent
------------|---------------------|---------------------------------------------
Store       | STORE_UNAVAILABLE   | Connection or driver failure

===============================================================================
RETRY POLICY
===============================================================================

Validation errors are not transient and are never retried.
StoreUnavailableError is the only retry-eligible kind: reads are safe to
repeat, creates are NOT (there are no idempotency keys, so a double submit
after a timeout can record an Allocation or Disbursement twice).
"""

from typing import Any


class BudgetKernelError(Exception):
    """
    Base exception for all budget kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BUDGET_KERNEL_ERROR"

    def to_details(self) -> dict[str, Any]:
        """Structured attributes of this error, for API error bodies."""
        return {
            key: value
            for key, value in vars(self).items()
            if not key.startswith("_")
        }


# Validation exceptions


class LedgerValidationError(BudgetKernelError):
    """Base exception for rejected create commands."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(LedgerValidationError):
    """A required field is absent, None, or blank."""

    code: str = "MISSING_FIELD"

    def __init__(self, kind: str, field: str):
        self.kind = kind
        self.field = field
        super().__init__(f"{kind}.{field} is required")


class InvalidAmountError(LedgerValidationError):
    """A monetary field does not parse to a non-negative amount."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, kind: str, field: str, value: Any):
        self.kind = kind
        self.field = field
        self.value = str(value)
        super().__init__(
            f"{kind}.{field} must be a non-negative amount, got {value!r}"
        )


class InvalidFieldError(LedgerValidationError):
    """A non-monetary field has a malformed value (year, date, status)."""

    code: str = "INVALID_FIELD"

    def __init__(self, kind: str, field: str, value: Any, reason: str):
        self.kind = kind
        self.field = field
        self.value = str(value)
        self.reason = reason
        super().__init__(f"{kind}.{field} is invalid: {reason} (got {value!r})")


class DanglingReferenceError(LedgerValidationError):
    """A foreign key does not resolve to an existing record."""

    code: str = "DANGLING_REFERENCE"

    def __init__(self, kind: str, field: str, target_kind: str, value: str):
        self.kind = kind
        self.field = field
        self.target_kind = target_kind
        self.value = value
        super().__init__(
            f"{kind}.{field} references unknown {target_kind}: {value}"
        )


class DuplicateKeyError(LedgerValidationError):
    """A caller-supplied code is already used within its entity kind."""

    code: str = "DUPLICATE_KEY"

    def __init__(self, kind: str, code_value: str):
        self.kind = kind
        self.code_value = code_value
        super().__init__(f"{kind} with code {code_value!r} already exists")


class CapExceededError(LedgerValidationError):
    """
    Child amounts would exceed the parent's amount.

    Only raised when strict caps are enabled; the default ledger records
    over-allocations and over-disbursements without complaint.
    """

    code: str = "CAP_EXCEEDED"

    def __init__(
        self,
        kind: str,
        parent_kind: str,
        parent_key: str,
        cap: Any,
        requested: Any,
    ):
        self.kind = kind
        self.parent_kind = parent_kind
        self.parent_key = parent_key
        self.cap = str(cap)
        self.requested = str(requested)
        super().__init__(
            f"{kind} total {requested} would exceed {parent_kind} "
            f"{parent_key} amount {cap}"
        )


# Store exceptions


class StoreError(BudgetKernelError):
    """Base exception for persistence-level failures."""

    code: str = "STORE_ERROR"


class StoreUnavailableError(StoreError):
    """The store could not be reached or the driver failed mid-operation."""

    code: str = "STORE_UNAVAILABLE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Store unavailable: {reason}")
