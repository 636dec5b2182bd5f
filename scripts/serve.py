#!/usr/bin/env python3
"""
Run the budget ledger JSON API on Django's development server.

Usage:
    python3 scripts/serve.py [addrport]      (default 127.0.0.1:8000)
"""

import os
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main() -> int:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "budget_api.settings")

    from django.core.management import execute_from_command_line

    from budget_api.wiring import build_ledger

    # Fail fast on a bad config or unreachable store
    build_ledger()

    addrport = sys.argv[1] if len(sys.argv) > 1 else "127.0.0.1:8000"
    execute_from_command_line([sys.argv[0], "runserver", addrport, "--noreload"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
