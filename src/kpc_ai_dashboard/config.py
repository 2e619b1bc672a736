from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "2026 KPC AI Dashboard"
APP_VERSION = "0.1.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ---------------------------------------------------------------------------
# Spreadsheet source
#
# The survey responses live in a Google Sheet published with "anyone with the
# link can view". We read its CSV export:
#   https://docs.google.com/spreadsheets/d/<SPREADSHEET_ID>/export?format=csv
#
# IMPORTANT:
#   - The first row of the sheet is the header row (question text).
#   - The export is read in full on every (manual) refresh.
# ---------------------------------------------------------------------------

SPREADSHEET_ID = os.getenv(
    "SPREADSHEET_ID",
    "1hNuZ_4r69CQ7prjCXdFK3sXGX8jkzC1NH7PlYjXzmYg",
).strip()

SHEET_CSV_EXPORT_URL = os.getenv(
    "SHEET_CSV_EXPORT_URL",
    f"https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/export?format=csv",
).strip()

CSV_FETCH_TIMEOUT_SECONDS = int(os.getenv("CSV_FETCH_TIMEOUT_SECONDS", "30"))

# Single-shot by default; the UI offers a manual retry button instead.
CSV_FETCH_RETRIES = int(os.getenv("CSV_FETCH_RETRIES", "0"))

# Seconds the UI keeps a fetched snapshot before hitting the sheet again.
CSV_CACHE_TTL_SECONDS = int(os.getenv("CSV_CACHE_TTL_SECONDS", "60"))

# ---------------------------------------------------------------------------
# LLM (Google Gemini) configuration
#
# The default is the model the dashboard launched with. Hosted model names
# are retired over time: set GEMINI_MODEL (e.g. a current "gemini-*-flash")
# in the environment when the default is no longer served.
# ---------------------------------------------------------------------------

GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-pro").strip()


def get_google_api_key() -> str:
    """
    Read the Gemini API key at call time (not import time) so a key added to
    the environment after startup is picked up without a restart.
    """
    return os.getenv(GOOGLE_API_KEY_ENV, "").strip()


# ---------------------------------------------------------------------------
# Insights API server
# ---------------------------------------------------------------------------

INSIGHTS_API_HOST = os.getenv("INSIGHTS_API_HOST", "127.0.0.1").strip()
INSIGHTS_API_PORT = int(os.getenv("INSIGHTS_API_PORT", "8000"))
