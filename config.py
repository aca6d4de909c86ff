"""
DonFundy - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("DONFUNDY_DB", f"sqlite:///{BASE_DIR / 'donfundy.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("DONFUNDY_HOST", "0.0.0.0")
PORT   = int(os.environ.get("DONFUNDY_PORT", "5000"))
DEBUG  = os.environ.get("DONFUNDY_DEBUG", "0") == "1"
SECRET = os.environ.get("DONFUNDY_SECRET", "donfundy-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("DONFUNDY_LOG_LEVEL", "INFO").upper()

# ── Bulk import ────────────────────────────────────────────────────────
# Every anonymous CSV row is attributed to the donor with this address
ANONYMOUS_EMAIL = os.environ.get("DONFUNDY_ANONYMOUS_EMAIL", "anonymous@donfundy.com")
MAX_UPLOAD_MB   = int(os.environ.get("DONFUNDY_MAX_UPLOAD_MB", "10"))

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
