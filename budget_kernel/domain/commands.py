"""
Create commands -- one tagged variant per entity kind.

Responsibility:
    Turns a loosely typed request payload (a JSON object from the HTTP
    adapter, a dict from a script) into an immutable, fully typed command.
    This is where validation rules 1 and 2 run: required-field presence,
    then numeric and format parsing.  Rules that need the store (foreign
    keys, uniqueness, caps) live in services/consistency_validator.py.

Architecture position:
    Kernel > Domain -- pure.  No ORM, no session, no wall clock (the Clock
    is injected for default dates).

Invariants enforced:
    - Rule order: every required field is checked before any amount is
      parsed, so a payload that is both incomplete and malformed reports
      MissingFieldError.
    - Amounts are Decimal, non-negative, finite, and rounded through
      round_money().  A blank or absent amount is zero, never an error.
    - Text fields never exceed FIELD_MAX_LENGTHS, the widths of the columns
      that store them.
    - Commands are frozen; a parsed command is never mutated.

Failure modes:
    - MissingFieldError, InvalidAmountError, InvalidFieldError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Union

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.values import (
    CODE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    ZERO,
    AllocationStatus,
    DisbursementStatus,
    EntityKind,
    round_money,
)
from budget_kernel.exceptions import (
    InvalidAmountError,
    InvalidFieldError,
    MissingFieldError,
)

# Largest single amount; its minor units fit a BIGINT column.  Totals are
# summed as Decimal outside the database, so they have no upper bound.
MAX_AMOUNT = Decimal("999999999999999.99")

MIN_FISCAL_YEAR = 1900
MAX_FISCAL_YEAR = 9999

FIELD_MAX_LENGTHS = {
    "code": CODE_MAX_LENGTH,
    "fund_code": CODE_MAX_LENGTH,
    "agency_code": CODE_MAX_LENGTH,
    "program_code": CODE_MAX_LENGTH,
    "name": NAME_MAX_LENGTH,
    "recipient": NAME_MAX_LENGTH,
    "description": TEXT_MAX_LENGTH,
    "notes": TEXT_MAX_LENGTH,
}


@dataclass(frozen=True)
class CreateFund:
    kind: ClassVar[EntityKind] = EntityKind.FUND

    code: str
    name: str
    fiscal_year: int
    total_budget: Decimal
    description: str | None = None

    @property
    def key(self) -> str:
        return self.code


@dataclass(frozen=True)
class CreateAgency:
    kind: ClassVar[EntityKind] = EntityKind.AGENCY

    code: str
    name: str
    description: str | None = None

    @property
    def key(self) -> str:
        return self.code


@dataclass(frozen=True)
class CreateProgram:
    kind: ClassVar[EntityKind] = EntityKind.PROGRAM

    code: str
    name: str
    fund_code: str
    agency_code: str
    allocated_amount: Decimal
    description: str | None = None

    @property
    def key(self) -> str:
        return self.code


@dataclass(frozen=True)
class CreateAllocation:
    kind: ClassVar[EntityKind] = EntityKind.ALLOCATION

    program_code: str
    amount: Decimal
    allocation_date: date
    status: AllocationStatus = AllocationStatus.APPROVED
    notes: str | None = None

    @property
    def key(self) -> str:
        return self.program_code


@dataclass(frozen=True)
class CreateDisbursement:
    kind: ClassVar[EntityKind] = EntityKind.DISBURSEMENT

    allocation_id: str
    amount: Decimal
    disbursement_date: date
    recipient: str = ""
    status: DisbursementStatus = DisbursementStatus.SENT
    notes: str | None = None

    @property
    def key(self) -> str:
        return self.allocation_id


CreateCommand = Union[
    CreateFund,
    CreateAgency,
    CreateProgram,
    CreateAllocation,
    CreateDisbursement,
]


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str | None:
    """Optional free text: blank becomes None, anything else a string."""
    if _is_blank(value):
        return None
    return value if isinstance(value, str) else str(value)


def check_length(kind: EntityKind, field: str, value: str | None) -> str | None:
    """Text no longer than the column that stores *field*."""
    limit = FIELD_MAX_LENGTHS[field]
    if value is not None and len(value) > limit:
        raise InvalidFieldError(
            kind.value, field, value, f"must be at most {limit} characters"
        )
    return value


def _optional_text(kind: EntityKind, payload: Mapping[str, Any], field: str) -> str | None:
    return check_length(kind, field, _text(payload.get(field)))


def require_fields(
    kind: EntityKind,
    payload: Mapping[str, Any],
    fields: tuple[str, ...],
) -> None:
    """Rule 1: every field in *fields* is present and non-blank."""
    for name in fields:
        if _is_blank(payload.get(name)):
            raise MissingFieldError(kind.value, name)


def parse_amount(kind: EntityKind, field: str, value: Any) -> Decimal:
    """
    Rule 2: parse a monetary field.

    Accepts Decimal, int, float (through its shortest repr) and numeric
    strings.  Blank or None is zero.

    Raises:
        InvalidAmountError: bool, non-numeric text (including "1_000"),
            NaN/Infinity, a negative value, or a value above MAX_AMOUNT.
    """
    if _is_blank(value):
        return ZERO
    if isinstance(value, bool):
        raise InvalidAmountError(kind.value, field, value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip()
        # Decimal() accepts digit-group underscores ("1_000")
        if "_" in text:
            raise InvalidAmountError(kind.value, field, value)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(kind.value, field, value) from None
    else:
        raise InvalidAmountError(kind.value, field, value)

    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        raise InvalidAmountError(kind.value, field, value)

    # abs() folds a negative zero ("-0") into zero
    return round_money(abs(amount))


def parse_fiscal_year(kind: EntityKind, value: Any, clock: Clock) -> int:
    """Integer fiscal year; absent means the clock's current year."""
    if _is_blank(value):
        return clock.today().year
    if isinstance(value, bool):
        raise InvalidFieldError(kind.value, "fiscal_year", value, "must be an integer")

    try:
        if isinstance(value, int):
            year = value
        elif isinstance(value, (Decimal, float)):
            if value != int(value):
                raise ValueError(value)
            year = int(value)
        elif isinstance(value, str) and "_" not in value:
            year = int(value.strip())
        else:
            raise ValueError(value)
    except (ValueError, ArithmeticError):
        raise InvalidFieldError(
            kind.value, "fiscal_year", value, "must be an integer"
        ) from None

    if not MIN_FISCAL_YEAR <= year <= MAX_FISCAL_YEAR:
        raise InvalidFieldError(
            kind.value,
            "fiscal_year",
            value,
            f"must be between {MIN_FISCAL_YEAR} and {MAX_FISCAL_YEAR}",
        )
    return year


def parse_calendar_date(kind: EntityKind, field: str, value: Any, clock: Clock) -> date:
    """ISO calendar date; absent means the clock's current date."""
    if _is_blank(value):
        return clock.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidFieldError(kind.value, field, value, "must be an ISO date (YYYY-MM-DD)")


def _parse_status(kind: EntityKind, value: Any, status_type, default):
    if _is_blank(value):
        return default
    try:
        return status_type(value)
    except ValueError:
        allowed = ", ".join(s.value for s in status_type)
        raise InvalidFieldError(
            kind.value, "status", value, f"must be one of: {allowed}"
        ) from None


# ---------------------------------------------------------------------------
# Per-kind builders
# ---------------------------------------------------------------------------


def _build_fund(payload: Mapping[str, Any], clock: Clock) -> CreateFund:
    kind = EntityKind.FUND
    require_fields(kind, payload, ("code", "name"))
    total_budget = parse_amount(kind, "total_budget", payload.get("total_budget"))
    return CreateFund(
        code=check_length(kind, "code", str(payload["code"])),
        name=check_length(kind, "name", str(payload["name"])),
        fiscal_year=parse_fiscal_year(kind, payload.get("fiscal_year"), clock),
        total_budget=total_budget,
        description=_optional_text(kind, payload, "description"),
    )


def _build_agency(payload: Mapping[str, Any], clock: Clock) -> CreateAgency:
    kind = EntityKind.AGENCY
    require_fields(kind, payload, ("code", "name"))
    return CreateAgency(
        code=check_length(kind, "code", str(payload["code"])),
        name=check_length(kind, "name", str(payload["name"])),
        description=_optional_text(kind, payload, "description"),
    )


def _build_program(payload: Mapping[str, Any], clock: Clock) -> CreateProgram:
    kind = EntityKind.PROGRAM
    # Blank fund_code/agency_code fall through to the reference check.
    require_fields(kind, payload, ("code", "name"))
    allocated_amount = parse_amount(
        kind, "allocated_amount", payload.get("allocated_amount")
    )
    return CreateProgram(
        code=check_length(kind, "code", str(payload["code"])),
        name=check_length(kind, "name", str(payload["name"])),
        fund_code=_optional_text(kind, payload, "fund_code") or "",
        agency_code=_optional_text(kind, payload, "agency_code") or "",
        allocated_amount=allocated_amount,
        description=_optional_text(kind, payload, "description"),
    )


def _build_allocation(payload: Mapping[str, Any], clock: Clock) -> CreateAllocation:
    kind = EntityKind.ALLOCATION
    require_fields(kind, payload, ("program_code",))
    amount = parse_amount(kind, "amount", payload.get("amount"))
    return CreateAllocation(
        program_code=check_length(kind, "program_code", str(payload["program_code"])),
        amount=amount,
        allocation_date=parse_calendar_date(
            kind, "allocation_date", payload.get("allocation_date"), clock
        ),
        status=_parse_status(
            kind, payload.get("status"), AllocationStatus, AllocationStatus.APPROVED
        ),
        notes=_optional_text(kind, payload, "notes"),
    )


def _build_disbursement(payload: Mapping[str, Any], clock: Clock) -> CreateDisbursement:
    kind = EntityKind.DISBURSEMENT
    require_fields(kind, payload, ("allocation_id",))
    amount = parse_amount(kind, "amount", payload.get("amount"))
    return CreateDisbursement(
        allocation_id=str(payload["allocation_id"]).strip(),
        amount=amount,
        disbursement_date=parse_calendar_date(
            kind, "disbursement_date", payload.get("disbursement_date"), clock
        ),
        recipient=_optional_text(kind, payload, "recipient") or "",
        status=_parse_status(
            kind, payload.get("status"), DisbursementStatus, DisbursementStatus.SENT
        ),
        notes=_optional_text(kind, payload, "notes"),
    )


_BUILDERS = {
    EntityKind.FUND: _build_fund,
    EntityKind.AGENCY: _build_agency,
    EntityKind.PROGRAM: _build_program,
    EntityKind.ALLOCATION: _build_allocation,
    EntityKind.DISBURSEMENT: _build_disbursement,
}


def parse_command(
    kind: EntityKind | str,
    payload: Mapping[str, Any],
    clock: Clock | None = None,
) -> CreateCommand:
    """
    Build the tagged create command for *kind* from a raw payload.

    Unknown keys in *payload* are ignored.

    Raises:
        ValueError: *kind* is not an entity kind.
        MissingFieldError / InvalidAmountError / InvalidFieldError.
    """
    kind = EntityKind(kind)
    return _BUILDERS[kind](payload, clock or SystemClock())
