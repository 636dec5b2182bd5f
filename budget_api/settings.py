"""
Budget Ledger – Django Settings (Infrastructure Only)
=====================================================
Django serves the JSON API only.  Persistence belongs to budget_kernel
(SQLAlchemy), so Django has no database and no apps of its own.
"""

from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
# TODO: Move to environment variable before any deployment
SECRET_KEY = "budget-ledger-dev-key-replace-before-deployment"

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS: list[str] = []

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "budget_api.urls"

# ── Database ──────────────────────────────────────────────────
# budget_kernel owns the store; see budget_config.
DATABASES: dict = {}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True
