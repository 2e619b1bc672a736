from __future__ import annotations

from typing import Dict, List

import pandas as pd
import pytest

from kpc_ai_dashboard.core.data_loader import SurveySnapshot

AFFILIATION = "Q1. 귀하의 소속은?"
TENURE = "Q2. 근속 년수는?"
MAJOR = "Q3. 전공 계열은?"
CONVERSATIONAL_USE = "Q4. 최근 3개월간 사용한 대화형 AI 도구를 모두 선택해주세요"
CONVERSATIONAL_PAID = "Q5. 유료로 결제 중인 대화형 AI 도구는?"
CODING_USE = "Q6. 사용한 코딩 AI 도구"
PAYMENT = "Q16. 월 평균 AI 결제 금액은?"
PAIN_POINT = "Q20. 가장 귀찮은 업무는?"

COLUMNS = [
    "타임스탬프",
    AFFILIATION,
    TENURE,
    MAJOR,
    CONVERSATIONAL_USE,
    CONVERSATIONAL_PAID,
    CODING_USE,
    PAYMENT,
    PAIN_POINT,
]


def make_snapshot(rows: List[Dict[str, str]], columns: List[str] = COLUMNS) -> SurveySnapshot:
    frame = pd.DataFrame([{c: row.get(c, "") for c in columns} for row in rows], columns=columns)
    return SurveySnapshot(frame=frame)


@pytest.fixture
def survey_rows() -> List[Dict[str, str]]:
    return [
        {
            AFFILIATION: "2026 신입사원",
            MAJOR: "공학",
            CONVERSATIONAL_USE: "ChatGPT, Claude",
            CONVERSATIONAL_PAID: "ChatGPT",
            CODING_USE: "Cursor",
            PAYMENT: "0원 초과 ~ 5만원 미만",
            PAIN_POINT: "회의록 정리",
        },
        {
            AFFILIATION: "2026 신입사원",
            MAJOR: "인문",
            CONVERSATIONAL_USE: "ChatGPT",
            CONVERSATIONAL_PAID: "유료 결제 없음",
            PAYMENT: "0원 (유료 결제 없음)",
            PAIN_POINT: "없음",
        },
        {
            AFFILIATION: "기존 직원",
            TENURE: "1년 미만",
            MAJOR: "공학",
            CONVERSATIONAL_USE: "ChatGPT, Gemini",
            CONVERSATIONAL_PAID: "ChatGPT",
            CODING_USE: "GitHub Copilot, Cursor",
            PAYMENT: "5만원 이상 ~ 10만원 미만",
            PAIN_POINT: "보고서 PPT 장표 만들기",
        },
        {
            AFFILIATION: "기존 직원",
            TENURE: "15년 이상",
            MAJOR: "경영",
            CONVERSATIONAL_USE: "사용 안 함",
            CONVERSATIONAL_PAID: "유료 결제 없음",
            PAYMENT: "0원 (유료 결제 없음)",
            PAIN_POINT: "영수증 정산, ERP 입력",
        },
        {
            AFFILIATION: "기존 직원",
            TENURE: "15년 이상",
            MAJOR: "공학",
            CONVERSATIONAL_USE: "ChatGPT, Claude, Perplexity",
            CONVERSATIONAL_PAID: "ChatGPT, Claude",
            CODING_USE: "GitHub Copilot",
            PAYMENT: "20만원 이상",
            PAIN_POINT: "이메일 답장",
        },
        {
            # blank affiliation: counted in the total only
            MAJOR: "",
            CONVERSATIONAL_USE: "ChatGPT",
            PAYMENT: "",
        },
    ]


@pytest.fixture
def snapshot(survey_rows) -> SurveySnapshot:
    return make_snapshot(survey_rows)
