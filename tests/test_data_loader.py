from __future__ import annotations

import pytest
import requests

from kpc_ai_dashboard.core import data_loader
from kpc_ai_dashboard.core.data_loader import DataLoaderError, load_survey_snapshot, parse_survey_csv

CSV_TEXT = (
    "타임스탬프,Q1. 귀하의 소속은?,Q4. 사용한 대화형 AI\n"
    "2026-01-02 10:00,2026 신입사원,\"ChatGPT, Claude\"\n"
    ",,\n"
    "2026-01-02 10:05,기존 직원,\n"
)


class _FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code
        self.encoding = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class _FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def test_parse_keeps_text_and_drops_blank_rows():
    df = parse_survey_csv(CSV_TEXT)
    assert list(df.columns) == ["타임스탬프", "Q1. 귀하의 소속은?", "Q4. 사용한 대화형 AI"]
    assert len(df) == 2
    assert df.iloc[0]["Q4. 사용한 대화형 AI"] == "ChatGPT, Claude"
    assert df.iloc[1]["Q4. 사용한 대화형 AI"] == ""


def test_parse_empty_text():
    assert parse_survey_csv("").empty


def test_load_snapshot_uses_session(monkeypatch):
    session = _FakeSession(response=_FakeResponse(CSV_TEXT))
    monkeypatch.setattr(data_loader, "_SESSION", session)

    snap = load_survey_snapshot("https://example.test/export?format=csv")

    assert len(snap) == 2
    assert snap.columns[1] == "Q1. 귀하의 소속은?"
    assert session.calls[0][0] == "https://example.test/export?format=csv"


def test_http_error_status_raises(monkeypatch):
    monkeypatch.setattr(data_loader, "_SESSION", _FakeSession(response=_FakeResponse("", status_code=404)))
    with pytest.raises(DataLoaderError, match="404"):
        load_survey_snapshot("https://example.test/export")


def test_transport_error_raises(monkeypatch):
    session = _FakeSession(exc=requests.ConnectionError("boom"))
    monkeypatch.setattr(data_loader, "_SESSION", session)
    with pytest.raises(DataLoaderError, match="boom"):
        load_survey_snapshot("https://example.test/export")


def test_retry_session_mounts_adapters():
    session = data_loader._build_retry_session(retries=2)
    adapter = session.get_adapter("https://docs.google.com/")
    assert adapter.max_retries.total == 2


def test_malformed_csv_raises_loader_error():
    with pytest.raises(DataLoaderError, match="parse"):
        parse_survey_csv("a,b\n1,2\n3,4,5\n")


def test_timed_load_reports_elapsed(monkeypatch):
    monkeypatch.setattr(data_loader, "_SESSION", _FakeSession(response=_FakeResponse(CSV_TEXT)))
    snap, elapsed = data_loader.timed_load_survey_snapshot("https://example.test/export")
    assert len(snap) == 2
    assert elapsed >= 0
