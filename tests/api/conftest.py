"""Django setup and ledger injection for the HTTP adapter tests."""

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "budget_api.settings")
django.setup()

from django.test import Client  # noqa: E402

from budget_api.wiring import reset_ledger, set_ledger  # noqa: E402


@pytest.fixture
def api_ledger(ledger):
    """Route the views to the test ledger."""
    set_ledger(ledger)
    yield ledger
    reset_ledger()


@pytest.fixture
def client(api_ledger) -> Client:
    return Client()

