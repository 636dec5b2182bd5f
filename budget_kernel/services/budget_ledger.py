"""
BudgetLedger -- the query/command interface of the kernel.

Responsibility:
    Single entry point for adapters (HTTP views, scripts, tests).  Parses raw
    payloads into create commands, validates them against the store, writes
    them, lists records and computes the summary.

Architecture position:
    Kernel > Services -- owns transaction boundaries.  Every other service
    and selector works inside a session that BudgetLedger opens.

Invariants enforced:
    - Atomic creates: parsing, validation and insert of one command run in
      one transaction under a process-wide write lock.  On any error nothing
      persists.
    - Consistent reads: get_summary() computes every figure in one
      transaction (REPEATABLE READ on PostgreSQL).

Failure modes:
    - LedgerValidationError subclasses: command rejected, nothing written.
    - StoreUnavailableError: the store could not be reached.
    - ValueError: unknown entity kind.

Audit relevance:
    Every accepted create logs ``entity_created``; every rejection logs
    ``command_rejected`` at WARNING with the error code.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from budget_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    is_postgres,
    session_scope,
)
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.commands import CreateCommand, parse_command
from budget_kernel.domain.dtos import (
    AgencyInfo,
    AllocationInfo,
    DisbursementInfo,
    FundInfo,
    ProgramInfo,
    RecordInfo,
    ValidationResult,
)
from budget_kernel.domain.summary import Summary
from budget_kernel.domain.values import EntityKind
from budget_kernel.exceptions import LedgerValidationError
from budget_kernel.logging_config import LogContext, get_logger
from budget_kernel.selectors.record_selector import RecordSelector
from budget_kernel.selectors.summary_selector import SummarySelector
from budget_kernel.services.consistency_validator import ConsistencyValidator
from budget_kernel.services.entity_store import EntityStore

logger = get_logger("services.budget_ledger")


class BudgetLedger:
    """
    Facade over the entity store, validator and summary selector.

    Args:
        session_factory: Factory for sessions; defaults to the engine's.
        clock: Source of created_at and field defaults.
        strict_caps: Enforce parent-amount caps on allocations and
            disbursements.
        exclude_rejected_allocations: Leave rejected allocations out of
            the summary's allocated figures.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        clock: Clock | None = None,
        strict_caps: bool = False,
        exclude_rejected_allocations: bool = False,
    ):
        self._session_factory = session_factory or get_session_factory()
        self._clock = clock or SystemClock()
        self._strict_caps = strict_caps
        self._exclude_rejected = exclude_rejected_allocations
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, config, clock: Clock | None = None) -> BudgetLedger:
        """
        Build a ledger from a loaded configuration.

        Initializes the engine and creates any missing tables.  *config*
        needs the attributes of budget_config.LedgerConfig.
        """
        init_engine_from_url(
            config.database_url,
            echo=config.echo,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
        create_tables()
        return cls(
            get_session_factory(),
            clock=clock,
            strict_caps=config.strict_caps,
            exclude_rejected_allocations=config.exclude_rejected_allocations,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, kind: EntityKind | str, payload: Mapping[str, Any]) -> RecordInfo:
        """
        Parse, validate and store one record of *kind*.

        Args:
            kind: Entity kind (enum or its string value).
            payload: Raw field values; unknown keys are ignored.

        Returns:
            The stored record.

        Raises:
            LedgerValidationError: the payload was rejected.
            ValueError: *kind* is not an entity kind.
        """
        kind = EntityKind(kind)
        try:
            command = parse_command(kind, payload, self._clock)
        except LedgerValidationError as exc:
            self._log_rejection(kind, exc)
            raise
        return self.execute(command)

    def execute(self, command: CreateCommand) -> RecordInfo:
        """Validate and store a pre-built create command."""
        kind = command.kind
        with LogContext.bind(entity_kind=kind.value, entity_key=command.key):
            with self._write_lock:
                try:
                    with session_scope(self._session_factory) as session:
                        ConsistencyValidator(session, self._strict_caps).check(command)
                        record = EntityStore(session, self._clock).create(command)
                except LedgerValidationError as exc:
                    self._log_rejection(kind, exc)
                    raise

            logger.info(
                "entity_created",
                extra={"record_id": str(record.id), "seq": record.seq},
            )
            return record

    def create_fund(self, payload: Mapping[str, Any]) -> FundInfo:
        return self.create(EntityKind.FUND, payload)

    def create_agency(self, payload: Mapping[str, Any]) -> AgencyInfo:
        return self.create(EntityKind.AGENCY, payload)

    def create_program(self, payload: Mapping[str, Any]) -> ProgramInfo:
        return self.create(EntityKind.PROGRAM, payload)

    def create_allocation(self, payload: Mapping[str, Any]) -> AllocationInfo:
        return self.create(EntityKind.ALLOCATION, payload)

    def create_disbursement(self, payload: Mapping[str, Any]) -> DisbursementInfo:
        return self.create(EntityKind.DISBURSEMENT, payload)

    def validate(
        self, kind: EntityKind | str, payload: Mapping[str, Any]
    ) -> ValidationResult:
        """
        Dry-run every rule against the current store.  Nothing is written.
        """
        try:
            command = parse_command(kind, payload, self._clock)
        except LedgerValidationError as exc:
            return ValidationResult.failure(exc)
        with session_scope(self._session_factory) as session:
            return ConsistencyValidator(session, self._strict_caps).validate(command)

    def _log_rejection(self, kind: EntityKind, exc: LedgerValidationError) -> None:
        logger.warning(
            "command_rejected",
            extra={
                "entity_kind": kind.value,
                "error_code": exc.code,
                "error_message": str(exc),
            },
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, kind: EntityKind | str) -> list[RecordInfo]:
        """All records of *kind* in insertion order."""
        with session_scope(self._session_factory) as session:
            return RecordSelector(session).list(kind)

    def list_funds(self) -> list[FundInfo]:
        return self.list(EntityKind.FUND)

    def list_agencies(self) -> list[AgencyInfo]:
        return self.list(EntityKind.AGENCY)

    def list_programs(self) -> list[ProgramInfo]:
        return self.list(EntityKind.PROGRAM)

    def list_allocations(self) -> list[AllocationInfo]:
        return self.list(EntityKind.ALLOCATION)

    def list_disbursements(self) -> list[DisbursementInfo]:
        return self.list(EntityKind.DISBURSEMENT)

    def get_summary(self) -> Summary:
        """Totals and per-program allocations computed from one snapshot."""
        with session_scope(self._session_factory) as session:
            if is_postgres():
                session.connection(
                    execution_options={"isolation_level": "REPEATABLE READ"}
                )
            return SummarySelector(
                session, exclude_rejected=self._exclude_rejected
            ).summarize()

    def ping(self) -> bool:
        """
        Round-trip a trivial query.

        Raises:
            StoreUnavailableError: the store cannot be reached.
        """
        with session_scope(self._session_factory) as session:
            session.execute(text("SELECT 1"))
        return True
