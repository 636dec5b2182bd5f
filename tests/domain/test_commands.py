"""Tests for payload parsing into create commands (validation rules 1 and 2)."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.commands import (
    CreateAgency,
    CreateAllocation,
    CreateDisbursement,
    CreateFund,
    CreateProgram,
    parse_command,
)
from budget_kernel.domain.values import (
    CODE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
)
from budget_kernel.exceptions import (
    InvalidAmountError,
    InvalidFieldError,
    MissingFieldError,
)

CLOCK = DeterministicClock(datetime(2025, 6, 15, 12, 0, 0, tzinfo=UTC))


def _parse(kind, payload):
    return parse_command(kind, payload, CLOCK)


class TestDispatch:
    def test_each_kind_builds_its_command(self):
        assert isinstance(_parse("fund", {"code": "F1", "name": "F"}), CreateFund)
        assert isinstance(_parse("agency", {"code": "A1", "name": "A"}), CreateAgency)
        assert isinstance(
            _parse("program", {"code": "P1", "name": "P", "fund_code": "F1", "agency_code": "A1"}),
            CreateProgram,
        )
        assert isinstance(_parse("allocation", {"program_code": "P1"}), CreateAllocation)
        assert isinstance(_parse("disbursement", {"allocation_id": "x"}), CreateDisbursement)

    def test_enum_kind_accepted(self):
        command = _parse(EntityKind.AGENCY, {"code": "A1", "name": "A"})
        assert command.kind is EntityKind.AGENCY

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            _parse("grant", {})

    def test_unknown_keys_ignored(self):
        command = _parse("agency", {"code": "A1", "name": "A", "color": "blue"})
        assert command == CreateAgency(code="A1", name="A")


class TestRequiredFields:
    @pytest.mark.parametrize(
        "kind,payload,field",
        [
            ("fund", {"name": "F"}, "code"),
            ("fund", {"code": "F1"}, "name"),
            ("agency", {"code": "   ", "name": "A"}, "code"),
            ("program", {"code": "P1", "name": None}, "name"),
            ("allocation", {"amount": "5"}, "program_code"),
            ("disbursement", {"amount": "5", "allocation_id": ""}, "allocation_id"),
        ],
    )
    def test_missing_field(self, kind, payload, field):
        with pytest.raises(MissingFieldError) as exc_info:
            _parse(kind, payload)
        assert exc_info.value.field == field
        assert exc_info.value.kind == kind
        assert exc_info.value.code == "MISSING_FIELD"

    def test_missing_field_reported_before_bad_amount(self):
        with pytest.raises(MissingFieldError):
            _parse("fund", {"name": "F", "total_budget": "lots"})

    def test_program_blank_references_pass_through(self):
        command = _parse("program", {"code": "P1", "name": "P"})
        assert command.fund_code == ""
        assert command.agency_code == ""


class TestAmounts:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1500", Decimal("1500.00")),
            ("  12.5 ", Decimal("12.50")),
            (100, Decimal("100.00")),
            (0.1, Decimal("0.10")),
            (Decimal("2.345"), Decimal("2.35")),
            ("-0", Decimal("0.00")),
        ],
    )
    def test_valid_amounts(self, raw, expected):
        command = _parse("fund", {"code": "F1", "name": "F", "total_budget": raw})
        assert command.total_budget == expected

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_amount_is_zero(self, blank):
        command = _parse("allocation", {"program_code": "P1", "amount": blank})
        assert command.amount == Decimal("0.00")

    def test_absent_amount_is_zero(self):
        command = _parse("program", {"code": "P1", "name": "P"})
        assert command.allocated_amount == Decimal("0.00")

    @pytest.mark.parametrize(
        "raw",
        ["abc", "-5", -0.01, True, "NaN", "Infinity", float("inf"), "1e20", [1], "1_000", "1_0.5"],
    )
    def test_invalid_amounts(self, raw):
        with pytest.raises(InvalidAmountError) as exc_info:
            _parse("allocation", {"program_code": "P1", "amount": raw})
        assert exc_info.value.field == "amount"
        assert exc_info.value.code == "INVALID_AMOUNT"


class TestFieldFormats:
    def test_fiscal_year_defaults_to_clock_year(self):
        command = _parse("fund", {"code": "F1", "name": "F"})
        assert command.fiscal_year == 2025

    @pytest.mark.parametrize("raw,expected", [("2026", 2026), (2024, 2024), (Decimal("2023"), 2023)])
    def test_fiscal_year_parsed(self, raw, expected):
        command = _parse("fund", {"code": "F1", "name": "F", "fiscal_year": raw})
        assert command.fiscal_year == expected

    @pytest.mark.parametrize("raw", ["twenty", "2025.5", 1.5, True, 12, "99999", "2_025"])
    def test_fiscal_year_invalid(self, raw):
        with pytest.raises(InvalidFieldError) as exc_info:
            _parse("fund", {"code": "F1", "name": "F", "fiscal_year": raw})
        assert exc_info.value.field == "fiscal_year"

    def test_amount_checked_before_fiscal_year(self):
        with pytest.raises(InvalidAmountError):
            _parse("fund", {"code": "F1", "name": "F", "total_budget": "x", "fiscal_year": "y"})

    def test_dates_default_to_clock_date(self):
        allocation = _parse("allocation", {"program_code": "P1"})
        disbursement = _parse("disbursement", {"allocation_id": "x"})
        assert allocation.allocation_date == date(2025, 6, 15)
        assert disbursement.disbursement_date == date(2025, 6, 15)

    def test_iso_date_parsed(self):
        command = _parse("allocation", {"program_code": "P1", "allocation_date": "2025-02-28"})
        assert command.allocation_date == date(2025, 2, 28)

    @pytest.mark.parametrize("raw", ["2025-02-30", "02/28/2025", 20250228])
    def test_invalid_date(self, raw):
        with pytest.raises(InvalidFieldError) as exc_info:
            _parse("allocation", {"program_code": "P1", "allocation_date": raw})
        assert exc_info.value.field == "allocation_date"

    def test_status_defaults(self):
        assert _parse("allocation", {"program_code": "P1"}).status is AllocationStatus.APPROVED
        assert _parse("disbursement", {"allocation_id": "x"}).status is DisbursementStatus.SENT

    def test_known_status(self):
        command = _parse("allocation", {"program_code": "P1", "status": "rejected"})
        assert command.status is AllocationStatus.REJECTED

    def test_unknown_status(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            _parse("disbursement", {"allocation_id": "x", "status": "lost"})
        assert exc_info.value.field == "status"
        assert "sent" in exc_info.value.reason


class TestCommandValues:
    def test_commands_are_frozen(self):
        command = _parse("agency", {"code": "A1", "name": "A"})
        with pytest.raises(AttributeError):
            command.code = "A2"

    def test_optional_text_blank_becomes_none(self):
        command = _parse("agency", {"code": "A1", "name": "A", "description": "  "})
        assert command.description is None

    def test_disbursement_allocation_id_stripped(self):
        command = _parse("disbursement", {"allocation_id": "  abc  ", "recipient": None})
        assert command.allocation_id == "abc"
        assert command.recipient == ""

    def test_key_is_identity_field(self):
        assert _parse("fund", {"code": "F1", "name": "F"}).key == "F1"
        assert _parse("allocation", {"program_code": "P9"}).key == "P9"


class TestTextLengths:
    @pytest.mark.parametrize(
        "kind,payload,field",
        [
            ("fund", {"code": "F" * 51, "name": "F"}, "code"),
            ("agency", {"code": "A1", "name": "N" * 256}, "name"),
            ("agency", {"code": "A1", "name": "A", "description": "d" * 4001}, "description"),
            ("program", {"code": "P1", "name": "P", "fund_code": "F" * 51}, "fund_code"),
            ("program", {"code": "P1", "name": "P", "agency_code": "A" * 51}, "agency_code"),
            ("allocation", {"program_code": "P" * 51}, "program_code"),
            ("allocation", {"program_code": "P1", "notes": "n" * 4001}, "notes"),
            ("disbursement", {"allocation_id": "x", "recipient": "r" * 256}, "recipient"),
        ],
    )
    def test_overlong_text_rejected(self, kind, payload, field):
        with pytest.raises(InvalidFieldError) as exc_info:
            _parse(kind, payload)
        assert exc_info.value.field == field
        assert exc_info.value.code == "INVALID_FIELD"

    def test_text_at_limit_accepted(self):
        command = _parse(
            "program",
            {
                "code": "P" * CODE_MAX_LENGTH,
                "name": "N" * NAME_MAX_LENGTH,
                "fund_code": "F" * CODE_MAX_LENGTH,
                "agency_code": "A" * CODE_MAX_LENGTH,
                "description": "d" * TEXT_MAX_LENGTH,
            },
        )
        assert len(command.code) == CODE_MAX_LENGTH
        assert len(command.description) == TEXT_MAX_LENGTH

    def test_missing_field_reported_before_length(self):
        with pytest.raises(MissingFieldError):
            _parse("fund", {"code": "F" * 51})
