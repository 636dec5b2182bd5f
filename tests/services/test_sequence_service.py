"""Tests for SequenceService counters."""

from budget_kernel.services.sequence_service import SequenceService


class TestSequenceService:
    def test_counters_seeded_at_zero(self, session):
        service = SequenceService(session)
        for name in ("fund", "agency", "program", "allocation", "disbursement"):
            assert service.current_value(name) == 0

    def test_next_value_is_monotonic(self, session):
        service = SequenceService(session)
        values = [service.next_value("fund") for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]

    def test_initialize_is_idempotent(self, session):
        service = SequenceService(session)
        service.next_value("fund")
        service.initialize_sequences()
        assert service.current_value("fund") == 1
