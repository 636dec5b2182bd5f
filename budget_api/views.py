"""
Budget Ledger Django Adapter Views
==================================
Pass-through HTTP views over budget_kernel.BudgetLedger.
"""

from __future__ import annotations

import json
import uuid
from decimal import Decimal
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from budget_api.wiring import build_ledger
from budget_kernel.domain.values import EntityKind
from budget_kernel.exceptions import (
    BudgetKernelError,
    CapExceededError,
    DuplicateKeyError,
    StoreUnavailableError,
)
from budget_kernel.logging_config import LogContext, get_logger

logger = get_logger("api.views")

REQUEST_ID_HEADER = "X-Request-ID"


def _status_for(exc: BudgetKernelError) -> int:
    if isinstance(exc, DuplicateKeyError):
        return 409
    if isinstance(exc, CapExceededError):
        return 422
    if isinstance(exc, StoreUnavailableError):
        return 503
    return 400


def _error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    return {
        "ok": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(_error_body(code, message), status=status)


def _kernel_error(exc: BudgetKernelError) -> JsonResponse:
    return JsonResponse(
        _error_body(exc.code, str(exc), exc.to_details()),
        status=_status_for(exc),
    )


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"), parse_float=Decimal)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _request_id(request: HttpRequest) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())


def _respond(request: HttpRequest, handler) -> JsonResponse:
    request_id = _request_id(request)
    with LogContext.bind(request_id=request_id):
        try:
            response = handler()
        except BudgetKernelError as exc:
            response = _kernel_error(exc)
    response[REQUEST_ID_HEADER] = request_id
    return response


def _list_view(kind: EntityKind):
    @csrf_exempt
    def view(request: HttpRequest) -> JsonResponse:
        if request.method != "GET":
            return _method_not_allowed()
        return _respond(
            request,
            lambda: JsonResponse(
                [record.to_dict() for record in build_ledger().list(kind)],
                safe=False,
            ),
        )

    view.__name__ = f"{kind.plural}_list_view"
    return view


def _create_view(kind: EntityKind):
    @csrf_exempt
    def view(request: HttpRequest) -> JsonResponse:
        if request.method != "POST":
            return _method_not_allowed()
        try:
            body = _parse_json_body(request)
        except ValueError as exc:
            return _json_error("INVALID_REQUEST", str(exc), status=400)
        return _respond(
            request,
            lambda: JsonResponse(
                build_ledger().create(kind, body).to_dict(), status=201
            ),
        )

    view.__name__ = f"{kind.value}_create_view"
    return view


funds_list_view = _list_view(EntityKind.FUND)
agencies_list_view = _list_view(EntityKind.AGENCY)
programs_list_view = _list_view(EntityKind.PROGRAM)
allocations_list_view = _list_view(EntityKind.ALLOCATION)
disbursements_list_view = _list_view(EntityKind.DISBURSEMENT)

fund_create_view = _create_view(EntityKind.FUND)
agency_create_view = _create_view(EntityKind.AGENCY)
program_create_view = _create_view(EntityKind.PROGRAM)
allocation_create_view = _create_view(EntityKind.ALLOCATION)
disbursement_create_view = _create_view(EntityKind.DISBURSEMENT)


@csrf_exempt
def summary_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _respond(
        request, lambda: JsonResponse(build_ledger().get_summary().to_dict())
    )


@csrf_exempt
def connectivity_view(request: HttpRequest) -> JsonResponse:
    """Report whether the store answers a round trip."""
    if request.method != "GET":
        return _method_not_allowed()
    request_id = _request_id(request)
    with LogContext.bind(request_id=request_id):
        try:
            build_ledger().ping()
        except StoreUnavailableError as exc:
            logger.error("connectivity_check_failed", extra={"reason": exc.reason})
            response = JsonResponse(
                {"ok": False, "store": "unreachable", "reason": exc.reason},
                status=503,
            )
        else:
            response = JsonResponse({"ok": True, "store": "reachable"})
    response[REQUEST_ID_HEADER] = request_id
    return response
