"""
SequenceService -- monotonic insertion sequences via locked counter rows.

Responsibility:
    Hands out strictly increasing sequence numbers, one sequence per entity
    kind.  The number is stored on each record as ``seq`` and is the only
    ordering used by list queries, so "insertion order" survives backends
    whose timestamps tie or whose row order is undefined.

Architecture position:
    Kernel > Services -- called by EntityStore inside the create transaction.

Invariants enforced:
    - Monotonicity: the locked counter row is the sole source of truth for
      the next value.  The SQL aggregate-max-plus-one pattern is never used.
    - Transactional: an increment is only visible once the caller's
      transaction commits.  A rejected create returns its value.

Failure modes:
    - IntegrityError: concurrent counter creation race (handled via
      savepoint rollback and retry).
"""

from sqlalchemy import BigInteger, String, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session, mapped_column

from budget_kernel.db.base import Base
from budget_kernel.domain.values import EntityKind
from budget_kernel.logging_config import get_logger

logger = get_logger("services.sequence")


class SequenceCounter(Base):
    """
    Sequence counter table.

    Each row represents a named sequence with its current value.
    Row-level locking keeps allocation monotonic under concurrency.
    """

    __tablename__ = "sequence_counters"

    # Sequence name (the entity kind, e.g. "fund", "allocation")
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    current_value: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )


class SequenceService:
    """
    Service for generating transactional sequence numbers.

    Guarantees:
        - Strictly monotonic values per sequence name.
        - ``SELECT ... FOR UPDATE`` serializes concurrent allocations on
          PostgreSQL; on SQLite the database-level write lock does.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
    """

    def __init__(self, session: Session):
        self._session = session

    def _locked_counter(self, sequence_name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_value(self, sequence_name: str) -> int:
        """
        Get the next value for a named sequence.

        Postconditions:
            - Returns an integer > 0 that is strictly greater than any value
              previously committed for this sequence name.

        Args:
            sequence_name: Name of the sequence.

        Returns:
            The next sequence value (always > 0).
        """
        counter = self._locked_counter(sequence_name)

        if counter is None:
            # First use of this sequence.  A savepoint keeps a lost creation
            # race from rolling back the caller's work.
            savepoint = self._session.begin_nested()
            try:
                counter = SequenceCounter(name=sequence_name, current_value=1)
                self._session.add(counter)
                self._session.flush()
                savepoint.commit()
                logger.debug(
                    "sequence_allocated",
                    extra={"sequence_name": sequence_name, "value": 1},
                )
                return 1
            except IntegrityError:
                logger.debug(
                    "sequence_counter_race_retry",
                    extra={"sequence_name": sequence_name},
                )
                savepoint.rollback()
                counter = self._locked_counter(sequence_name)
                if counter is None:
                    raise

        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int | None:
        """Current value of a sequence without incrementing (None if unused)."""
        counter = self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

        return counter.current_value if counter else None

    def initialize_sequences(self) -> None:
        """
        Create a zeroed counter for every entity kind that lacks one.

        Called by create_tables() so that normal operation never takes the
        counter-creation path.
        """
        for kind in EntityKind:
            existing = self._session.execute(
                select(SequenceCounter)
                .where(SequenceCounter.name == kind.value)
            ).scalar_one_or_none()

            if existing is None:
                self._session.add(SequenceCounter(name=kind.value, current_value=0))

        self._session.flush()
