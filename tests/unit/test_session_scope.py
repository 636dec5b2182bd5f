"""Tests for session_scope() commit, rollback and error mapping."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from budget_kernel.db.engine import session_scope
from budget_kernel.exceptions import StoreUnavailableError
from budget_kernel.services.sequence_service import SequenceCounter


def _fund_counter(session) -> int:
    return session.execute(
        select(SequenceCounter.current_value).where(SequenceCounter.name == "fund")
    ).scalar_one()


class TestSessionScope:
    def test_commits_on_success(self, session_factory):
        with session_scope(session_factory) as session:
            session.execute(
                SequenceCounter.__table__.update()
                .where(SequenceCounter.name == "fund")
                .values(current_value=7)
            )

        with session_scope(session_factory) as session:
            assert _fund_counter(session) == 7

    def test_rolls_back_and_reraises(self, session_factory):
        with pytest.raises(KeyError):
            with session_scope(session_factory) as session:
                session.execute(
                    SequenceCounter.__table__.update()
                    .where(SequenceCounter.name == "fund")
                    .values(current_value=9)
                )
                raise KeyError("boom")

        with session_scope(session_factory) as session:
            assert _fund_counter(session) == 0

    def test_driver_failure_becomes_store_unavailable(self, session_factory, captured_logs):
        with pytest.raises(StoreUnavailableError) as exc_info:
            with session_scope(session_factory):
                raise OperationalError("SELECT 1", {}, Exception("server closed"))

        assert exc_info.value.code == "STORE_UNAVAILABLE"
        assert "server closed" in exc_info.value.reason
        assert any(
            r["message"] == "store_unavailable" and r["level"] == "ERROR"
            for r in captured_logs()
        )
