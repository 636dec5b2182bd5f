"""
ConsistencyValidator -- store-dependent checks on create commands.

Responsibility:
    Runs the checks that need the store, after parse_command() has settled
    field presence and field formats:

        3. References resolve (Program -> Fund and Agency,
           Allocation -> Program, Disbursement -> Allocation).
        4. Caller-supplied codes are unique within their kind.
        5. (strict_caps only) Child totals stay within the parent amount.

    The first failing rule wins.

Architecture position:
    Kernel > Services -- read-only, but runs inside BudgetLedger's write
    transaction so the checks and the insert see the same state.

Invariants enforced:
    - A command that passes check() can be inserted without violating a
      reference or uniqueness constraint, provided the write lock is held.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from budget_kernel.domain.commands import (
    CreateAllocation,
    CreateCommand,
    CreateDisbursement,
    CreateProgram,
)
from budget_kernel.domain.dtos import ValidationResult
from budget_kernel.domain.values import (
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
)
from budget_kernel.exceptions import (
    CapExceededError,
    DanglingReferenceError,
    DuplicateKeyError,
    LedgerValidationError,
)
from budget_kernel.selectors.record_selector import RecordSelector
from budget_kernel.selectors.summary_selector import SummarySelector


class ConsistencyValidator:
    """
    Validates commands against the current store contents.

    Args:
        session: Session of the enclosing write transaction.
        strict_caps: Reject allocations beyond a program's allocated_amount
            and disbursements beyond an allocation's amount.  Off by default;
            over-commitment is recorded, not refused.
    """

    def __init__(self, session: Session, strict_caps: bool = False):
        self._records = RecordSelector(session)
        self._totals = SummarySelector(session)
        self._strict_caps = strict_caps

    def validate(self, command: CreateCommand) -> ValidationResult:
        """Run every rule; return the first failure instead of raising."""
        try:
            self.check(command)
        except LedgerValidationError as exc:
            return ValidationResult.failure(exc)
        return ValidationResult.success()

    def check(self, command: CreateCommand) -> None:
        """
        Run every rule in order.

        Raises:
            DanglingReferenceError: a referenced record does not exist.
            DuplicateKeyError: the code is taken.
            CapExceededError: strict caps are on and would be exceeded.
        """
        self._check_references(command)
        self._check_unique(command)
        if self._strict_caps:
            self._check_caps(command)

    def _check_references(self, command: CreateCommand) -> None:
        kind = command.kind.value
        if isinstance(command, CreateProgram):
            if not self._records.code_exists(EntityKind.FUND, command.fund_code):
                raise DanglingReferenceError(
                    kind, "fund_code", EntityKind.FUND.value, command.fund_code
                )
            if not self._records.code_exists(EntityKind.AGENCY, command.agency_code):
                raise DanglingReferenceError(
                    kind, "agency_code", EntityKind.AGENCY.value, command.agency_code
                )
        elif isinstance(command, CreateAllocation):
            if not self._records.code_exists(EntityKind.PROGRAM, command.program_code):
                raise DanglingReferenceError(
                    kind, "program_code", EntityKind.PROGRAM.value, command.program_code
                )
        elif isinstance(command, CreateDisbursement):
            if self._records.find_allocation(command.allocation_id) is None:
                raise DanglingReferenceError(
                    kind,
                    "allocation_id",
                    EntityKind.ALLOCATION.value,
                    command.allocation_id,
                )

    def _check_unique(self, command: CreateCommand) -> None:
        if command.kind.has_code and self._records.code_exists(command.kind, command.key):
            raise DuplicateKeyError(command.kind.value, command.key)

    def _check_caps(self, command: CreateCommand) -> None:
        if isinstance(command, CreateAllocation):
            if command.status is AllocationStatus.REJECTED:
                return
            program = self._records.find_program(command.program_code)
            requested = self._totals.program_allocated(program.code) + command.amount
            self._raise_if_over(
                command, EntityKind.PROGRAM, program.code,
                program.allocated_amount, requested,
            )
        elif isinstance(command, CreateDisbursement):
            if command.status is DisbursementStatus.FAILED:
                return
            allocation = self._records.find_allocation(command.allocation_id)
            requested = self._totals.allocation_disbursed(allocation.id) + command.amount
            self._raise_if_over(
                command, EntityKind.ALLOCATION, str(allocation.id),
                allocation.amount, requested,
            )

    @staticmethod
    def _raise_if_over(
        command: CreateCommand,
        parent_kind: EntityKind,
        parent_key: str,
        cap: Decimal,
        requested: Decimal,
    ) -> None:
        if requested > cap:
            raise CapExceededError(
                command.kind.value, parent_kind.value, parent_key, cap, requested
            )
