"""Tests for ConsistencyValidator: references, uniqueness and strict caps."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from budget_kernel.domain.commands import (
    CreateAgency,
    CreateAllocation,
    CreateDisbursement,
    CreateFund,
    CreateProgram,
)
from budget_kernel.domain.values import AllocationStatus, DisbursementStatus
from budget_kernel.exceptions import (
    CapExceededError,
    DanglingReferenceError,
    DuplicateKeyError,
)
from budget_kernel.services.consistency_validator import ConsistencyValidator


def _program(code="P3", fund_code="F1", agency_code="A1"):
    return CreateProgram(
        code=code,
        name="New",
        fund_code=fund_code,
        agency_code=agency_code,
        allocated_amount=Decimal("10.00"),
    )


def _allocation(program_code="P1", amount="10", status=AllocationStatus.APPROVED):
    return CreateAllocation(
        program_code=program_code,
        amount=Decimal(amount),
        allocation_date=date(2025, 1, 1),
        status=status,
    )


def _disbursement(allocation_id, amount="10", status=DisbursementStatus.SENT):
    return CreateDisbursement(
        allocation_id=str(allocation_id),
        amount=Decimal(amount),
        disbursement_date=date(2025, 1, 2),
        status=status,
    )


class TestReferences:
    def test_valid_program(self, hierarchy, session):
        ConsistencyValidator(session).check(_program())

    def test_fund_checked_before_agency(self, hierarchy, session):
        with pytest.raises(DanglingReferenceError) as exc_info:
            ConsistencyValidator(session).check(
                _program(fund_code="F9", agency_code="A9")
            )
        assert exc_info.value.field == "fund_code"
        assert exc_info.value.target_kind == "fund"

    def test_unknown_agency(self, hierarchy, session):
        with pytest.raises(DanglingReferenceError) as exc_info:
            ConsistencyValidator(session).check(_program(agency_code="A9"))
        assert exc_info.value.field == "agency_code"

    def test_blank_reference_is_dangling(self, hierarchy, session):
        with pytest.raises(DanglingReferenceError):
            ConsistencyValidator(session).check(_program(fund_code=""))

    def test_reference_match_is_exact(self, hierarchy, session):
        with pytest.raises(DanglingReferenceError):
            ConsistencyValidator(session).check(_program(fund_code="f1"))

    def test_allocation_program(self, hierarchy, session):
        validator = ConsistencyValidator(session)
        validator.check(_allocation("P2"))
        with pytest.raises(DanglingReferenceError):
            validator.check(_allocation("P9"))

    def test_disbursement_allocation(self, ledger, hierarchy, session):
        allocation = ledger.create_allocation({"program_code": "P1", "amount": "10"})
        validator = ConsistencyValidator(session)

        validator.check(_disbursement(allocation.id))
        with pytest.raises(DanglingReferenceError):
            validator.check(_disbursement(uuid4()))
        with pytest.raises(DanglingReferenceError):
            validator.check(_disbursement("garbage"))


class TestUniqueness:
    def test_duplicate_codes(self, hierarchy, session):
        validator = ConsistencyValidator(session)
        with pytest.raises(DuplicateKeyError):
            validator.check(CreateFund(code="F1", name="x", fiscal_year=2025,
                                       total_budget=Decimal("0.00")))
        with pytest.raises(DuplicateKeyError):
            validator.check(CreateAgency(code="A1", name="x"))
        with pytest.raises(DuplicateKeyError):
            validator.check(_program(code="P1"))

    def test_codes_scoped_per_kind(self, hierarchy, session):
        # "A1" is an agency code, not a fund code
        ConsistencyValidator(session).check(
            CreateFund(code="A1", name="x", fiscal_year=2025, total_budget=Decimal("0.00"))
        )

    def test_references_checked_before_uniqueness(self, hierarchy, session):
        with pytest.raises(DanglingReferenceError):
            ConsistencyValidator(session).check(_program(code="P1", fund_code="F9"))

    def test_validate_returns_result(self, hierarchy, session):
        result = ConsistencyValidator(session).validate(CreateAgency(code="A1", name="x"))
        assert not result.is_valid
        assert isinstance(result.error, DuplicateKeyError)
        assert ConsistencyValidator(session).validate(CreateAgency(code="A2", name="x"))


class TestStrictCaps:
    def test_caps_off_by_default(self, hierarchy, session):
        ConsistencyValidator(session).check(_allocation("P2", "1000"))

    def test_allocation_within_program_amount(self, strict_ledger, hierarchy):
        strict_ledger.create_allocation({"program_code": "P2", "amount": "60"})
        strict_ledger.create_allocation({"program_code": "P2", "amount": "40"})

        with pytest.raises(CapExceededError) as exc_info:
            strict_ledger.create_allocation({"program_code": "P2", "amount": "0.01"})

        assert exc_info.value.parent_kind == "program"
        assert exc_info.value.parent_key == "P2"
        assert exc_info.value.cap == "100.00"
        assert exc_info.value.requested == "100.01"
        assert len(strict_ledger.list_allocations()) == 2

    def test_rejected_allocations_do_not_count(self, strict_ledger, hierarchy):
        strict_ledger.create_allocation(
            {"program_code": "P2", "amount": "500", "status": "rejected"}
        )
        strict_ledger.create_allocation({"program_code": "P2", "amount": "100"})

    def test_disbursement_within_allocation_amount(self, strict_ledger, hierarchy):
        allocation = strict_ledger.create_allocation({"program_code": "P1", "amount": "50"})
        allocation_id = str(allocation.id)
        strict_ledger.create_disbursement({"allocation_id": allocation_id, "amount": "50"})
        strict_ledger.create_disbursement(
            {"allocation_id": allocation_id, "amount": "10", "status": "failed"}
        )

        with pytest.raises(CapExceededError) as exc_info:
            strict_ledger.create_disbursement({"allocation_id": allocation_id, "amount": "1"})

        assert exc_info.value.parent_kind == "allocation"
        assert exc_info.value.parent_key == allocation_id
