#!/usr/bin/env python3
"""
Seed the budget ledger with a small demo hierarchy.

Drops all tables, recreates them, then creates 2 funds, 2 agencies,
3 programs, 4 allocations and 3 disbursements through BudgetLedger, so
every record passes the same validation as an API request.

Usage:
    python3 scripts/seed_data.py [--config path/to/config.yaml]
"""

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------
FUNDS = [
    {"code": "GF-2025", "name": "General Fund", "fiscal_year": 2025,
     "total_budget": "5000000.00", "description": "Unrestricted operating fund"},
    {"code": "CAP-2025", "name": "Capital Projects Fund", "fiscal_year": 2025,
     "total_budget": "2500000.00"},
]

AGENCIES = [
    {"code": "DPW", "name": "Department of Public Works"},
    {"code": "DOH", "name": "Department of Health"},
]

PROGRAMS = [
    {"code": "ROADS", "name": "Road Resurfacing", "fund_code": "CAP-2025",
     "agency_code": "DPW", "allocated_amount": "1200000.00"},
    {"code": "PARKS", "name": "Park Maintenance", "fund_code": "GF-2025",
     "agency_code": "DPW", "allocated_amount": "400000.00"},
    {"code": "CLINIC", "name": "Community Clinics", "fund_code": "GF-2025",
     "agency_code": "DOH", "allocated_amount": "900000.00"},
]

ALLOCATIONS = [
    {"program_code": "ROADS", "amount": "450000.00", "allocation_date": "2025-02-01"},
    {"program_code": "ROADS", "amount": "300000.00", "allocation_date": "2025-04-15",
     "status": "pending"},
    {"program_code": "CLINIC", "amount": "250000.00", "allocation_date": "2025-03-01"},
    {"program_code": "PARKS", "amount": "80000.00", "allocation_date": "2025-03-10",
     "status": "rejected", "notes": "Resubmit with vendor quotes"},
]

# (index into ALLOCATIONS, disbursement fields)
DISBURSEMENTS = [
    (0, {"amount": "150000.00", "disbursement_date": "2025-02-20",
         "recipient": "Metro Paving LLC"}),
    (0, {"amount": "100000.00", "disbursement_date": "2025-03-20",
         "recipient": "Metro Paving LLC", "status": "scheduled"}),
    (2, {"amount": "60000.00", "disbursement_date": "2025-03-15",
         "recipient": "Eastside Clinic"}),
]


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--config", help="YAML config layered over the defaults")
    args = parser.parse_args()

    logging.disable(logging.CRITICAL)

    from budget_config import get_active_config
    from budget_kernel.db.engine import create_tables, drop_tables, init_engine_from_url
    from budget_kernel.domain.clock import DeterministicClock
    from budget_kernel.exceptions import BudgetKernelError
    from budget_kernel.services.budget_ledger import BudgetLedger

    config = get_active_config(args.config)

    # -----------------------------------------------------------------
    # 1. Connect + reset
    # -----------------------------------------------------------------
    print()
    print(f"  [1/3] Connecting to {config.redacted_url()}...")
    try:
        init_engine_from_url(config.database_url, echo=False)
        drop_tables()
        create_tables()
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    ledger = BudgetLedger(
        clock=DeterministicClock(datetime(2025, 6, 15, 12, 0, 0, tzinfo=UTC)),
        strict_caps=config.strict_caps,
        exclude_rejected_allocations=config.exclude_rejected_allocations,
    )

    # -----------------------------------------------------------------
    # 2. Hierarchy
    # -----------------------------------------------------------------
    print("  [2/3] Creating funds, agencies and programs...")
    try:
        for payload in FUNDS:
            ledger.create_fund(payload)
        for payload in AGENCIES:
            ledger.create_agency(payload)
        for payload in PROGRAMS:
            ledger.create_program(payload)

        # -------------------------------------------------------------
        # 3. Money movements
        # -------------------------------------------------------------
        print("  [3/3] Recording allocations and disbursements...")
        allocations = [ledger.create_allocation(p) for p in ALLOCATIONS]
        for index, payload in DISBURSEMENTS:
            ledger.create_disbursement(
                {"allocation_id": str(allocations[index].id), **payload}
            )
    except BudgetKernelError as exc:
        print(f"  ERROR: {exc.code}: {exc}", file=sys.stderr)
        return 1

    summary = ledger.get_summary()
    print()
    print(f"  Funds:            {summary.total_funds}")
    print(f"  Total budget:     {summary.total_budget:>15,}")
    print(f"  Total allocated:  {summary.total_allocated:>15,}")
    print(f"  Total disbursed:  {summary.total_disbursed:>15,}")
    print()
    print("  Done. Run scripts/view_summary.py to see the dashboard.")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
