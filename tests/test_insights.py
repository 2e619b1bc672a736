from __future__ import annotations

import pytest

from kpc_ai_dashboard.core.insights import (
    MISSING_KEY_MESSAGE,
    NO_DATA_MESSAGE,
    InsightConfigError,
    InsightRequest,
    InsightValidationError,
    format_prompt,
    handle_insights_request,
    require_api_key,
)

STATS = {"total": 10, "rookie": 3, "veteran": 7, "paidRate전체": 40}
CHART = [{"name": "ChatGPT", "신입": 100, "기존": 71}, {"name": "Claude", "신입": 33, "기존": 14}]


def _payload(**extra):
    payload = {"stats": STATS, "chartData": CHART}
    payload.update(extra)
    return payload


def test_prompt_contains_totals_and_chart_rows():
    prompt = format_prompt(STATS, CHART)
    assert "- 총 응답자: 10명" in prompt
    assert "- 신입사원: 3명 (30%)" in prompt
    assert "- 기존직원: 7명 (70%)" in prompt
    assert "- ChatGPT: 신입 100% / 기존 71%" in prompt
    assert "## 🎯 핵심 발견" in prompt
    assert "## 🚀 KPC AI전환센터의 제안" in prompt
    assert "유료 결제" not in prompt


def test_prompt_without_chart_rows():
    assert "- 데이터 수집 중" in format_prompt(STATS, [])


def test_prompt_optional_sections():
    tenure = [{"tenure": "신입", "count": 3, "paidRate": 33, "avgPayment": 0.8}]
    prompt = format_prompt(STATS, CHART, paid_ratio=40, tenure_stats=tenure)
    assert "- 전체 응답자 중 유료 결제 비율: 40%" in prompt
    assert "- 신입 (3명): 유료 결제율 33%, 평균 월 결제액 0.8만원" in prompt


def test_prompt_is_deterministic():
    assert format_prompt(STATS, CHART) == format_prompt(dict(STATS), list(CHART))


def test_request_validation():
    with pytest.raises(InsightValidationError):
        InsightRequest.from_payload(None)
    with pytest.raises(InsightValidationError):
        InsightRequest.from_payload({"stats": {"total": 0}})
    req = InsightRequest.from_payload(_payload(paidRatio=40))
    assert req.paid_ratio == 40 and req.yearly_paid is None


def test_missing_key_short_circuits(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    calls = []
    result = handle_insights_request(_payload(), generate=lambda p, k: calls.append(p) or "x")
    assert result.status_code == 500
    assert result.insights == MISSING_KEY_MESSAGE
    assert calls == []


def test_zero_total_is_rejected_before_llm_call():
    calls = []
    result = handle_insights_request({"stats": {"total": 0}}, api_key="k", generate=lambda p, k: calls.append(p) or "x")
    assert result.status_code == 400
    assert result.insights == NO_DATA_MESSAGE
    assert calls == []


def test_completion_is_passed_through(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    seen = {}

    def fake_generate(prompt, key):
        seen["prompt"], seen["key"] = prompt, key
        return "## 🎯 핵심 발견\n..."

    result = handle_insights_request(_payload(), generate=fake_generate)
    assert result.status_code == 200
    assert result.to_json() == {"insights": "## 🎯 핵심 발견\n..."}
    assert seen["key"] == "env-key"
    assert "- Claude: 신입 33% / 기존 14%" in seen["prompt"]


def test_llm_failure_becomes_fallback_text():
    def failing(prompt, key):
        raise RuntimeError("quota exceeded")

    result = handle_insights_request(_payload(), api_key="k", generate=failing)
    assert result.status_code == 500
    assert "quota exceeded" in result.insights
    assert result.insights.startswith("⚠️ AI 인사이트 생성 중 오류가 발생했습니다.")


def test_require_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(InsightConfigError):
        require_api_key()
    with pytest.raises(InsightConfigError):
        require_api_key("  ")
    assert require_api_key(" k ") == "k"


def test_non_dict_rows_never_reach_the_llm():
    calls = []
    result = handle_insights_request(
        {"stats": STATS, "chartData": ["ChatGPT"]},
        api_key="k",
        generate=lambda p, k: calls.append(p) or "x",
    )
    assert result.status_code == 500
    assert calls == []
