"""Tests for the Summary DTO and the allocation-by-program bars."""

from decimal import Decimal

from budget_kernel.domain.summary import (
    DEFAULT_BAR_LIMIT,
    ProgramAllocation,
    Summary,
    allocation_bars,
    sort_by_program,
)


def _summary(*rows: tuple[str, str]) -> Summary:
    by_program = sort_by_program(
        [ProgramAllocation(code, Decimal(amount)) for code, amount in rows]
    )
    total = sum((row.allocated for row in by_program), Decimal("0.00"))
    return Summary(
        total_funds=1,
        total_budget=Decimal("1000.00"),
        total_allocated=total,
        total_disbursed=Decimal("0.00"),
        by_program=by_program,
    )


class TestSortByProgram:
    def test_descending_by_allocated(self):
        summary = _summary(("P2", "30.00"), ("P1", "150.00"))
        assert [r.program_code for r in summary.by_program] == ["P1", "P2"]

    def test_ties_broken_by_code(self):
        summary = _summary(("B", "10.00"), ("C", "10.00"), ("A", "10.00"))
        assert [r.program_code for r in summary.by_program] == ["A", "B", "C"]


class TestSummary:
    def test_to_dict_renders_amounts_as_strings(self):
        summary = _summary(("P1", "150.00"), ("P2", "30.00"))
        assert summary.to_dict() == {
            "total_funds": 1,
            "total_budget": "1000.00",
            "total_allocated": "180.00",
            "total_disbursed": "0.00",
            "by_program": [
                {"program_code": "P1", "allocated": "150.00"},
                {"program_code": "P2", "allocated": "30.00"},
            ],
        }


class TestAllocationBars:
    def test_no_rows(self):
        assert allocation_bars(_summary()) == []

    def test_widths_relative_to_largest(self):
        bars = allocation_bars(_summary(("P1", "200.00"), ("P2", "50.00")))
        assert [(b.program_code, b.width_percent) for b in bars] == [
            ("P1", Decimal("100.0")),
            ("P2", Decimal("25.0")),
        ]

    def test_all_zero_allocations_render_empty(self):
        bars = allocation_bars(_summary(("P1", "0.00"), ("P2", "0.00")))
        assert all(b.width_percent == Decimal("0.0") for b in bars)

    def test_small_totals_use_unit_denominator(self):
        bars = allocation_bars(_summary(("P1", "0.50")))
        assert bars[0].width_percent == Decimal("50.0")

    def test_limited_to_top_rows(self):
        rows = [(f"P{i:02d}", str(100 - i)) for i in range(12)]
        bars = allocation_bars(_summary(*rows))
        assert len(bars) == DEFAULT_BAR_LIMIT == 8
        assert bars[0].program_code == "P00"

    def test_custom_limit(self):
        bars = allocation_bars(_summary(("P1", "5"), ("P2", "4"), ("P3", "3")), limit=2)
        assert [b.program_code for b in bars] == ["P1", "P2"]
