from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import logging

import google.generativeai as genai

from kpc_ai_dashboard.config import GEMINI_MODEL, GOOGLE_API_KEY_ENV, get_google_api_key
from kpc_ai_dashboard.core.aggregation import round_percent
from kpc_ai_dashboard.core.schema import ROOKIE_LABEL, VETERAN_LABEL

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    f"⚠️ {GOOGLE_API_KEY_ENV} 환경변수가 설정되지 않았습니다. 배포 환경의 환경변수를 확인해주세요."
)
NO_DATA_MESSAGE = "⚠️ 아직 응답 데이터가 없습니다. 설문 응답 후 다시 시도해주세요."
EMPTY_RESULT_MESSAGE = "인사이트 생성 실패"
CONNECTION_FAILED_MESSAGE = "API 연결 실패. 환경변수를 확인해주세요."
NO_CHART_DATA_LINE = "- 데이터 수집 중"


class InsightConfigError(Exception):
    """Raised when the LLM credential is missing."""


class InsightValidationError(Exception):
    """Raised when the aggregate payload has nothing to summarize."""


@dataclass
class InsightRequest:
    """
    Aggregates the LLM is allowed to talk about.

    Mirrors the JSON body of POST /api/insights:
      {stats: {total, rookie, veteran, ...},
       chartData: [{name, 신입, 기존}, ...],
       paidRatio?: number,         # overall paid rate, percent
       yearlyPaid?: [{tenure, count, paidRate, avgPayment}, ...]}
    """
    stats: Dict[str, Any]
    chart_data: List[Dict[str, Any]]
    paid_ratio: Optional[float] = None
    yearly_paid: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "InsightRequest":
        if not isinstance(payload, dict):
            raise InsightValidationError(NO_DATA_MESSAGE)
        stats = payload.get("stats") or {}
        if not isinstance(stats, dict):
            raise InsightValidationError(NO_DATA_MESSAGE)
        try:
            total = int(stats.get("total") or 0)
        except (TypeError, ValueError):
            total = 0
        if not stats or total == 0:
            raise InsightValidationError(NO_DATA_MESSAGE)

        return cls(
            stats=stats,
            chart_data=list(payload.get("chartData") or []),
            paid_ratio=payload.get("paidRatio"),
            yearly_paid=payload.get("yearlyPaid"),
        )


@dataclass
class InsightResponse:
    status_code: int
    insights: str

    def to_json(self) -> Dict[str, str]:
        return {"insights": self.insights}


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _chart_summary(chart_rows: List[Dict[str, Any]]) -> str:
    if not chart_rows:
        return NO_CHART_DATA_LINE
    return "\n".join(
        f"- {row.get('name', '')}: {ROOKIE_LABEL} {row.get(ROOKIE_LABEL, 0)}% / {VETERAN_LABEL} {row.get(VETERAN_LABEL, 0)}%"
        for row in chart_rows
    )


def _tenure_summary(tenure_stats: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f"- {row.get('tenure', '')} ({row.get('count', 0)}명): "
        f"유료 결제율 {row.get('paidRate', 0)}%, 평균 월 결제액 {row.get('avgPayment', 0)}만원"
        for row in tenure_stats
    )


def format_prompt(
    stats: Dict[str, Any],
    chart_rows: List[Dict[str, Any]],
    paid_ratio: Optional[float] = None,
    tenure_stats: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """
    Render the aggregates into the fixed instruction block sent to Gemini.

    Pure string templating: the same inputs always give the same prompt.
    """
    total = _int(stats.get("total"))
    rookie = _int(stats.get("rookie"))
    veteran = _int(stats.get("veteran"))

    sections = [
        "당신은 KPC(한국생산성본부) AI 전환센터의 데이터 분석가입니다.",
        "아래 설문 결과를 바탕으로 신입사원 교육 발표용 인사이트를 작성해주세요.",
        "",
        "[응답자 현황]",
        f"- 총 응답자: {total}명",
        f"- 신입사원: {rookie}명 ({round_percent(rookie, total)}%)",
        f"- 기존직원: {veteran}명 ({round_percent(veteran, total)}%)",
        "",
        "[대화형 AI 사용률 - 그룹 내 비율]",
        _chart_summary(chart_rows),
    ]

    if paid_ratio is not None:
        sections += ["", "[유료 결제 현황]", f"- 전체 응답자 중 유료 결제 비율: {paid_ratio}%"]

    if tenure_stats:
        sections += ["", "[년차별 유료 결제 현황]", _tenure_summary(tenure_stats)]

    sections += [
        "",
        "다음 형식으로 작성해주세요:",
        "",
        "## 🎯 핵심 발견",
        "1. (신입 vs 기존 비교 인사이트 - 구체적 수치 포함)",
        "2. (가장 많이 사용하는 도구 분석)",
        "3. (주목할 만한 차이점)",
        "",
        "## 💬 신입사원에게 한마디",
        "(환영 & 동기부여 메시지, 2-3문장. 따뜻하고 응원하는 톤으로!)",
        "",
        "## 🚀 KPC AI전환센터의 제안",
        "(AI 활용 팁 1가지)",
        "",
        "톤: 친근하고 활기차게, 이모지 적절히 사용",
        "분량: 총 300단어 내외",
    ]
    return "\n".join(sections)


# ---------------------------------------------------------------------------
# LLM call
# ---------------------------------------------------------------------------

def require_api_key(api_key: Optional[str] = None) -> str:
    key = get_google_api_key() if api_key is None else api_key.strip()
    if not key:
        raise InsightConfigError(MISSING_KEY_MESSAGE)
    return key


def generate_insights_text(prompt: str, api_key: str, model_name: str = GEMINI_MODEL) -> str:
    """
    Single-shot Gemini completion. The returned text is passed through as-is.
    """
    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name)
    response = model.generate_content(prompt)
    return response.text


def handle_insights_request(
    payload: Any,
    api_key: Optional[str] = None,
    generate: Callable[[str, str], str] = generate_insights_text,
) -> InsightResponse:
    """
    Endpoint logic for POST /api/insights, shared by the Flask route and the
    in-process call from the dashboard.

      - no API key                    -> 500, no LLM call
      - malformed / empty / zero data -> 400, no LLM call
      - prompt or LLM failure         -> 500 with the error text
    """
    try:
        key = require_api_key(api_key)
    except InsightConfigError as exc:
        logger.warning("Insight generation skipped: %s not set.", GOOGLE_API_KEY_ENV)
        return InsightResponse(status_code=500, insights=str(exc))

    try:
        req = InsightRequest.from_payload(payload)
    except InsightValidationError as exc:
        return InsightResponse(status_code=400, insights=str(exc))

    try:
        prompt = format_prompt(req.stats, req.chart_data, req.paid_ratio, req.yearly_paid)
        text = generate(prompt, key)
    except Exception as exc:
        logger.exception("Gemini API error")
        message = str(exc) or "알 수 없는 오류"
        return InsightResponse(
            status_code=500,
            insights=(
                "⚠️ AI 인사이트 생성 중 오류가 발생했습니다.\n\n"
                f"에러: {message}\n\n"
                f"환경변수({GOOGLE_API_KEY_ENV})와 API 할당량을 확인해주세요."
            ),
        )

    return InsightResponse(status_code=200, insights=text)
