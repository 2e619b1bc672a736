from __future__ import annotations

import io
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

import logging
import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from kpc_ai_dashboard.config import (
    CSV_FETCH_RETRIES,
    CSV_FETCH_TIMEOUT_SECONDS,
    SHEET_CSV_EXPORT_URL,
)

logger = logging.getLogger(__name__)


class DataLoaderError(Exception):
    """Raised when the spreadsheet export cannot be fetched or parsed."""


@dataclass(frozen=True)
class SurveySnapshot:
    """
    One loaded copy of the survey sheet.

    `frame` holds one row per response, columns in sheet order, every cell as
    text ("" for blanks). A snapshot is never mutated; a reload produces a new
    one.
    """
    frame: pd.DataFrame
    loaded_at: datetime = field(default_factory=datetime.now)

    @property
    def columns(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    def __len__(self) -> int:
        return len(self.frame)


def _build_retry_session(retries: int = CSV_FETCH_RETRIES) -> requests.Session:
    """
    Build a requests Session for the sheet export.

    Retries default to 0: a failed load is surfaced to the user, who can
    retry from the UI.
    """
    session = requests.Session()

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_retry_session()
    return _SESSION


def fetch_sheet_csv(url: Optional[str] = None, timeout_seconds: int = CSV_FETCH_TIMEOUT_SECONDS) -> str:
    target = (url or SHEET_CSV_EXPORT_URL or "").strip()
    if not target:
        raise DataLoaderError("Missing spreadsheet export URL. Expected SHEET_CSV_EXPORT_URL to be set.")

    try:
        resp = _get_session().get(target, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise DataLoaderError(f"HTTP error while fetching the spreadsheet: {exc}") from exc

    if not resp.ok:
        raise DataLoaderError(f"스프레드시트를 불러올 수 없습니다. (status={resp.status_code})")

    # Google serves the export as UTF-8 but doesn't always say so.
    resp.encoding = "utf-8"
    return resp.text


def parse_survey_csv(csv_text: str) -> pd.DataFrame:
    """
    Parse CSV text into a response table using the first row as header.

    Every cell is kept as text. Rows with no non-empty value (trailing blank
    lines in the sheet) are dropped.
    """
    if not csv_text or not csv_text.strip():
        return pd.DataFrame()

    try:
        df = pd.read_csv(
            io.StringIO(csv_text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoaderError(f"Could not parse spreadsheet CSV: {exc}") from exc

    df = df.fillna("")
    has_value = (df.apply(lambda col: col.astype(str).str.strip()) != "").any(axis=1)
    return df[has_value].reset_index(drop=True)


def load_survey_snapshot(url: Optional[str] = None) -> SurveySnapshot:
    csv_text = fetch_sheet_csv(url)
    frame = parse_survey_csv(csv_text)
    logger.info("Loaded survey snapshot: %d responses x %d columns", len(frame), len(frame.columns))
    return SurveySnapshot(frame=frame)


def timed_load_survey_snapshot(url: Optional[str] = None) -> Tuple[SurveySnapshot, float]:
    """
    Convenience helper for UI timing logs.
    """
    t0 = time.perf_counter()
    snapshot = load_survey_snapshot(url)
    return snapshot, (time.perf_counter() - t0)
