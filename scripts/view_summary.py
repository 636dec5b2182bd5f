#!/usr/bin/env python3
"""
View the budget summary from persisted data.

Connects to the configured store (run seed_data.py first) and prints
the headline totals and the top allocation-by-program bars.

Usage:
    python3 scripts/view_summary.py [--config path/to/config.yaml] [--limit 8]
"""

import argparse
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 72
BAR_WIDTH = 40


def print_summary(summary, bars) -> None:
    print()
    print("=" * W)
    print("  BUDGET SUMMARY".center(W))
    print("=" * W)
    print(f"  {'Funds':<24}{summary.total_funds:>20}")
    print(f"  {'Total budget':<24}{summary.total_budget:>20,}")
    print(f"  {'Total allocated':<24}{summary.total_allocated:>20,}")
    print(f"  {'Total disbursed':<24}{summary.total_disbursed:>20,}")
    print("-" * W)
    print("  ALLOCATION BY PROGRAM")
    print("-" * W)
    if not bars:
        print("  (no allocations)")
    for bar in bars:
        filled = int(bar.width_percent * BAR_WIDTH / 100)
        print(
            f"  {bar.program_code:<12} {'#' * filled:<{BAR_WIDTH}} "
            f"{bar.allocated:>14,}"
        )
    print("=" * W)
    print()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--config", help="YAML config layered over the defaults")
    parser.add_argument("--limit", type=int, default=8, help="programs to chart")
    args = parser.parse_args()

    logging.disable(logging.CRITICAL)

    from budget_config import get_active_config
    from budget_kernel.db.engine import init_engine_from_url
    from budget_kernel.domain.summary import allocation_bars
    from budget_kernel.exceptions import StoreUnavailableError
    from budget_kernel.services.budget_ledger import BudgetLedger

    config = get_active_config(args.config)

    # -----------------------------------------------------------------
    # Connect
    # -----------------------------------------------------------------
    try:
        init_engine_from_url(config.database_url, echo=False)
    except Exception as exc:
        print(f"  ERROR: Could not connect: {exc}", file=sys.stderr)
        return 1

    ledger = BudgetLedger(
        exclude_rejected_allocations=config.exclude_rejected_allocations,
    )
    try:
        summary = ledger.get_summary()
    except StoreUnavailableError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        print("  Run seed_data.py first.", file=sys.stderr)
        return 1

    print_summary(summary, allocation_bars(summary, limit=args.limit))
    return 0


if __name__ == "__main__":
    sys.exit(main())
