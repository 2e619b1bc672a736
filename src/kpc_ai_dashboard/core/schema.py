"""
Survey vocabulary.

Every piece of business text the aggregation engine depends on: column
keywords, answer labels, enumerations and sentinel phrases. These strings must
match the live survey form exactly (including spacing around "~" and the
", " checkbox delimiter), so edit them together with the form.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

# ---------------------------------------------------------------------------
# Column keyword queries
# ---------------------------------------------------------------------------

AFFILIATION_KEYWORDS = ["소속"]
TENURE_KEYWORDS = ["Q2", "근속"]
MAJOR_KEYWORDS = ["Q3", "전공"]
PAYMENT_KEYWORDS = ["Q16", "금액"]
PAIN_POINT_KEYWORDS = ["Q20", "귀찮은"]

# ---------------------------------------------------------------------------
# Cohorts
# ---------------------------------------------------------------------------

ROOKIE_MARKER = "신입"
ROOKIE_LABEL = "신입"
VETERAN_LABEL = "기존"

# ---------------------------------------------------------------------------
# Checkbox answers
# ---------------------------------------------------------------------------

CHECKBOX_DELIMITER = ", "

# An item containing any of these means "I don't use it / none / n.a."
EXCLUDE_KEYWORDS = ["사용 안", "없음", "안 함", "해당"]

# ---------------------------------------------------------------------------
# Tool usage questions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolQuestion:
    key: str
    title: str
    keywords: List[str]
    tools: List[str]


CONVERSATIONAL_QUESTION = ToolQuestion(
    key="conversational",
    title="💬 대화형 AI 사용률",
    keywords=["Q4", "대화형", "사용한"],
    tools=["ChatGPT", "Claude", "Gemini", "뤼튼", "Copilot", "Perplexity"],
)

CODING_QUESTION = ToolQuestion(
    key="coding",
    title="💻 코딩·개발 AI 사용률",
    keywords=["Q6", "코딩", "사용한"],
    tools=["GitHub Copilot", "Cursor", "Google Colab", "Replit", "Claude Code"],
)

IMAGE_QUESTION = ToolQuestion(
    key="image",
    title="🎨 이미지 생성 AI 사용률",
    keywords=["Q8", "이미지", "사용한"],
    tools=["Midjourney", "DALL-E", "Stable Diffusion", "Canva AI", "Adobe Firefly"],
)

TOOL_QUESTIONS = [CONVERSATIONAL_QUESTION, CODING_QUESTION, IMAGE_QUESTION]

# ---------------------------------------------------------------------------
# Paid conversion (usage question -> paid question, per tool)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionTool:
    name: str
    paid_key: str


@dataclass(frozen=True)
class ConversionCategory:
    name: str
    use_keywords: List[str]
    paid_keywords: List[str]
    tools: List[ConversionTool]


CONVERSION_CATEGORIES = [
    ConversionCategory(
        name="💬 대화형 AI",
        use_keywords=["Q4", "대화형", "사용한"],
        paid_keywords=["Q5", "대화형", "유료"],
        tools=[
            ConversionTool("ChatGPT", "ChatGPT"),
            ConversionTool("Claude", "Claude"),
            ConversionTool("Gemini", "Gemini"),
            ConversionTool("Perplexity", "Perplexity"),
            ConversionTool("Copilot", "Copilot"),
        ],
    ),
    ConversionCategory(
        name="💻 코딩·개발 AI",
        use_keywords=["Q6", "코딩", "사용한"],
        paid_keywords=["Q7", "코딩", "유료"],
        tools=[
            ConversionTool("Cursor", "Cursor"),
            ConversionTool("Google Colab", "Colab"),
            ConversionTool("GitHub Copilot", "Copilot"),
        ],
    ),
    ConversionCategory(
        name="📝 문서·생산성 AI",
        use_keywords=["Q12", "문서", "사용한"],
        paid_keywords=["Q13", "문서", "유료"],
        tools=[
            ConversionTool("Google Workspace AI", "Google Workspace"),
            ConversionTool("Notion AI", "Notion"),
            ConversionTool("MS Copilot", "MS Copilot"),
        ],
    ),
    ConversionCategory(
        name="🔄 자동화/노코드",
        use_keywords=["Q14", "자동화", "사용한"],
        paid_keywords=["Q15", "자동화", "유료"],
        tools=[
            ConversionTool("n8n", "n8n"),
            ConversionTool("Make", "Make"),
            ConversionTool("Zapier", "Zapier"),
        ],
    ),
]

NO_PAID_MARKER = "유료 결제 없음"
MIN_CONVERSION_USERS = 3

# ---------------------------------------------------------------------------
# Tenure bands
# ---------------------------------------------------------------------------

TENURE_ORDER = [
    "1년 미만",
    "1년 이상 ~ 5년 미만",
    "5년 이상 ~ 10년 미만",
    "10년 이상 ~ 15년 미만",
    "15년 이상",
]
TENURE_SHORT = ["~1년", "1-5년", "5-10년", "10-15년", "15년+"]

ROOKIE_BAND = "신입"
FULL_TENURE_ORDER = [ROOKIE_BAND] + TENURE_ORDER
FULL_TENURE_SHORT = [ROOKIE_BAND] + TENURE_SHORT

# ---------------------------------------------------------------------------
# Payment buckets (monthly spend on paid AI tools, units of 10,000 KRW)
# ---------------------------------------------------------------------------

PAYMENT_NONE = "0원 (유료 결제 없음)"

# Order matters: labels are matched by substring, first hit wins.
PAYMENT_BUCKETS: List[tuple] = [
    (PAYMENT_NONE, 0.0),
    ("0원 초과 ~ 5만원 미만", 2.5),
    ("5만원 이상 ~ 10만원 미만", 7.5),
    ("10만원 이상 ~ 20만원 미만", 15.0),
    ("20만원 이상", 25.0),
]

PAYMENT_SHORT_LABELS: Dict[str, str] = {
    PAYMENT_NONE: "0원",
    "0원 초과 ~ 5만원 미만": "~5만원",
    "5만원 이상 ~ 10만원 미만": "5~10만원",
    "10만원 이상 ~ 20만원 미만": "10~20만원",
    "20만원 이상": "20만원+",
}

# ---------------------------------------------------------------------------
# Free-text pain points ("the most annoying task")
# ---------------------------------------------------------------------------

PAIN_POINT_IGNORED = {"", "-", ".", "없음"}

PAIN_POINT_CATEGORIES: Dict[str, List[str]] = {
    "데이터 복붙/처리": ["데이터", "복붙", "처리", "정리", "편집"],
    "행정/기안/공문": ["행정", "기안", "공문"],
    "영수증/전표 처리": ["영수증", "전표", "정산", "erp"],
    "보고서/PPT 작성": ["보고서", "ppt", "장표"],
    "회의록 정리": ["회의록"],
    "메일 관련": ["메일", "이메일"],
}

PAIN_POINT_TOP_N = 5
