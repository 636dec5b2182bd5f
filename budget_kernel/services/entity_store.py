"""
EntityStore -- persistence of ledger records.

Responsibility:
    Turns a validated create command into a row, allocates its insertion
    sequence, and returns the stored record as a DTO.  Lists records of a
    kind in insertion order.

Architecture position:
    Kernel > Services -- called by BudgetLedger after ConsistencyValidator
    has accepted the command, inside the same transaction.

Invariants enforced:
    - Every stored record carries a fresh UUID ``id`` and a per-kind ``seq``.
      Allocations and Disbursements are identified by that ``id``; Funds,
      Agencies and Programs by their caller-supplied ``code``.
    - Database constraints are the backstop for the validator: a unique or
      foreign-key violation at flush becomes the matching typed error.

Failure modes:
    - DuplicateKeyError: the code's unique constraint rejected the insert.
    - DanglingReferenceError: a foreign-key constraint rejected the insert.
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.commands import (
    CreateAgency,
    CreateAllocation,
    CreateCommand,
    CreateDisbursement,
    CreateFund,
    CreateProgram,
)
from budget_kernel.domain.dtos import RecordInfo
from budget_kernel.domain.values import EntityKind
from budget_kernel.exceptions import DanglingReferenceError, DuplicateKeyError
from budget_kernel.logging_config import get_logger
from budget_kernel.models import Agency, Allocation, Disbursement, Fund, Program
from budget_kernel.selectors.record_selector import (
    RecordSelector,
    parse_record_id,
    to_dto,
)
from budget_kernel.services.base import BaseService
from budget_kernel.services.sequence_service import SequenceService

logger = get_logger("services.entity_store")


class EntityStore(BaseService):
    """
    Write-side store for the five record kinds.

    Guarantees:
        - create() flushes but never commits.
        - The returned DTO reflects exactly what was written.

    Non-goals:
        - Does NOT validate references or uniqueness up front -- that is
          ConsistencyValidator's job.  Constraint violations that slip
          through are still mapped to typed errors.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._sequences = SequenceService(session)
        self._selector = RecordSelector(session)

    def _build_row(self, command: CreateCommand):
        if isinstance(command, CreateFund):
            return Fund(
                code=command.code,
                name=command.name,
                fiscal_year=command.fiscal_year,
                total_budget=command.total_budget,
                description=command.description,
            )
        if isinstance(command, CreateAgency):
            return Agency(
                code=command.code,
                name=command.name,
                description=command.description,
            )
        if isinstance(command, CreateProgram):
            return Program(
                code=command.code,
                name=command.name,
                fund_code=command.fund_code,
                agency_code=command.agency_code,
                allocated_amount=command.allocated_amount,
                description=command.description,
            )
        if isinstance(command, CreateAllocation):
            return Allocation(
                program_code=command.program_code,
                amount=command.amount,
                allocation_date=command.allocation_date,
                status=command.status.value,
                notes=command.notes,
            )
        if isinstance(command, CreateDisbursement):
            allocation_id = parse_record_id(command.allocation_id)
            if allocation_id is None:
                raise DanglingReferenceError(
                    EntityKind.DISBURSEMENT.value,
                    "allocation_id",
                    EntityKind.ALLOCATION.value,
                    command.allocation_id,
                )
            return Disbursement(
                allocation_id=allocation_id,
                amount=command.amount,
                disbursement_date=command.disbursement_date,
                recipient=command.recipient,
                status=command.status.value,
                notes=command.notes,
            )
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    def _integrity_error(self, command: CreateCommand):
        kind = command.kind
        if kind.has_code:
            # Program's foreign keys are checked before insert, so a
            # constraint failure here is the code's unique index.
            return DuplicateKeyError(kind.value, command.key)
        if kind is EntityKind.ALLOCATION:
            return DanglingReferenceError(
                kind.value, "program_code", EntityKind.PROGRAM.value, command.key
            )
        return DanglingReferenceError(
            kind.value, "allocation_id", EntityKind.ALLOCATION.value, command.key
        )

    def create(self, command: CreateCommand) -> RecordInfo:
        """
        Insert the record described by *command*.

        Preconditions:
            - *command* passed ConsistencyValidator in this transaction.

        Postconditions:
            - The row is flushed with a new id, seq and created_at.

        Returns:
            The stored record as a DTO.

        Raises:
            DuplicateKeyError / DanglingReferenceError: constraint violation.
        """
        row = self._build_row(command)
        row.id = uuid4()
        row.seq = self._sequences.next_value(command.kind.value)
        row.created_at = self._clock.now()
        self.session.add(row)
        try:
            self.session.flush()
        except IntegrityError as exc:
            logger.warning(
                "constraint_violation",
                extra={"entity_kind": command.kind.value, "detail": str(exc.orig)},
            )
            raise self._integrity_error(command) from exc

        return to_dto(command.kind, row)

    def list(self, kind: EntityKind | str) -> list[RecordInfo]:
        """All records of *kind* in insertion order."""
        return self._selector.list(kind)

