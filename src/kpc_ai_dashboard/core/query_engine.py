from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import logging
import pandas as pd

from kpc_ai_dashboard.core.aggregation import group_percentages, round_percent
from kpc_ai_dashboard.core.cohorts import split_by_affiliation, split_by_tenure
from kpc_ai_dashboard.core.columns import resolve_column
from kpc_ai_dashboard.core.data_loader import SurveySnapshot
from kpc_ai_dashboard.core.payments import average_spend, paid_count
from kpc_ai_dashboard.core.schema import (
    AFFILIATION_KEYWORDS,
    CONVERSION_CATEGORIES,
    FULL_TENURE_ORDER,
    FULL_TENURE_SHORT,
    MAJOR_KEYWORDS,
    MIN_CONVERSION_USERS,
    NO_PAID_MARKER,
    PAIN_POINT_CATEGORIES,
    PAIN_POINT_IGNORED,
    PAIN_POINT_KEYWORDS,
    PAIN_POINT_TOP_N,
    PAYMENT_BUCKETS,
    PAYMENT_KEYWORDS,
    PAYMENT_SHORT_LABELS,
    ROOKIE_LABEL,
    TENURE_KEYWORDS,
    TOOL_QUESTIONS,
    VETERAN_LABEL,
    ToolQuestion,
)

logger = logging.getLogger(__name__)


@dataclass
class GroupStats:
    total: int
    rookie: int
    veteran: int
    paid_rate_overall: int

    @property
    def rookie_percent(self) -> int:
        return round_percent(self.rookie, self.total)

    @property
    def veteran_percent(self) -> int:
        return round_percent(self.veteran, self.total)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "rookie": self.rookie,
            "veteran": self.veteran,
            "paidRate전체": self.paid_rate_overall,
        }


@dataclass
class ToolUsage:
    name: str
    rookie: int
    veteran: int

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, ROOKIE_LABEL: self.rookie, VETERAN_LABEL: self.veteran}


@dataclass
class TenurePayment:
    tenure: str       # short label for charts, e.g. "1-5년"
    full_tenure: str  # label as answered in the survey
    count: int
    paid_rate: int    # percent
    avg_payment: float

    def to_record(self) -> Dict[str, Any]:
        return {
            "tenure": self.tenure,
            "fullTenure": self.full_tenure,
            "count": self.count,
            "paidRate": self.paid_rate,
            "avgPayment": self.avg_payment,
        }


@dataclass
class ConversionRow:
    name: str
    users: int
    paid: int
    rate: int


@dataclass
class ConversionGroup:
    category: str
    data: List[ConversionRow]


@dataclass
class PainPointCount:
    category: str
    count: int


@dataclass
class PainPoints:
    top: List[PainPointCount]
    all_answers: List[str]


@dataclass
class NamedCount:
    name: str
    value: int
    full_name: Optional[str] = None


@dataclass
class DashboardView:
    """
    Every aggregate the dashboard shows, derived from one snapshot.
    """
    stats: GroupStats
    tool_charts: Dict[str, List[ToolUsage]]
    tenure: List[TenurePayment]
    majors: List[NamedCount]
    conversion: List[ConversionGroup]
    pain_points: PainPoints
    payments: List[NamedCount]
    columns_resolved: Dict[str, Optional[str]] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _column_values(frame: pd.DataFrame, column: str) -> List[str]:
    return frame[column].fillna("").astype(str).tolist()


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

def compute_group_stats(snapshot: SurveySnapshot) -> GroupStats:
    frame = snapshot.frame
    if len(frame) == 0:
        return GroupStats(total=0, rookie=0, veteran=0, paid_rate_overall=0)

    col_affiliation = resolve_column(snapshot.columns, AFFILIATION_KEYWORDS)
    col_payment = resolve_column(snapshot.columns, PAYMENT_KEYWORDS)

    if col_affiliation is None:
        logger.warning("Affiliation column not found; cohort stats unavailable.")
        return GroupStats(total=len(frame), rookie=0, veteran=0, paid_rate_overall=0)

    split = split_by_affiliation(frame, col_affiliation)

    paid_pct = 0
    if col_payment is not None:
        values = _column_values(frame, col_payment)
        paid_pct = round_percent(paid_count(values), len(values))

    return GroupStats(
        total=split.total,
        rookie=len(split.rookie),
        veteran=len(split.veteran),
        paid_rate_overall=paid_pct,
    )


def build_tool_chart(snapshot: SurveySnapshot, tools: List[str], column_keywords: List[str]) -> List[ToolUsage]:
    """
    Per-tool adoption rate (percent) among new hires vs. veterans.
    """
    frame = snapshot.frame
    if len(frame) == 0:
        return []

    col_affiliation = resolve_column(snapshot.columns, AFFILIATION_KEYWORDS)
    col_target = resolve_column(snapshot.columns, column_keywords)
    if col_affiliation is None or col_target is None:
        return []

    split = split_by_affiliation(frame, col_affiliation)
    rookie_rates = group_percentages(split.rookie, col_target, tools)
    veteran_rates = group_percentages(split.veteran, col_target, tools)

    return [
        ToolUsage(name=tool, rookie=rookie_rates[i], veteran=veteran_rates[i])
        for i, tool in enumerate(tools)
    ]


def build_question_chart(snapshot: SurveySnapshot, question: ToolQuestion) -> List[ToolUsage]:
    return build_tool_chart(snapshot, question.tools, question.keywords)


def build_tenure_payments(snapshot: SurveySnapshot) -> List[TenurePayment]:
    """
    Paid rate and average monthly spend per tenure band (new hires first).
    """
    frame = snapshot.frame
    if len(frame) == 0:
        return []

    col_affiliation = resolve_column(snapshot.columns, AFFILIATION_KEYWORDS)
    col_tenure = resolve_column(snapshot.columns, TENURE_KEYWORDS)
    col_payment = resolve_column(snapshot.columns, PAYMENT_KEYWORDS)
    if col_payment is None:
        return []

    bands = split_by_tenure(frame, col_tenure, col_affiliation)

    out: List[TenurePayment] = []
    for band, members in bands.items():
        values = _column_values(members, col_payment)
        idx = FULL_TENURE_ORDER.index(band)
        out.append(
            TenurePayment(
                tenure=FULL_TENURE_SHORT[idx],
                full_tenure=band,
                count=len(values),
                paid_rate=round_percent(paid_count(values), len(values)),
                avg_payment=_round_half_up(average_spend(values), 1),
            )
        )
    return out


def build_major_distribution(snapshot: SurveySnapshot) -> List[NamedCount]:
    frame = snapshot.frame
    if len(frame) == 0:
        return []

    col_major = resolve_column(snapshot.columns, MAJOR_KEYWORDS)
    if col_major is None:
        return []

    counter: Dict[str, int] = {}
    for major in _column_values(frame, col_major):
        if major:
            counter[major] = counter.get(major, 0) + 1

    ranked = sorted(counter.items(), key=lambda kv: kv[1], reverse=True)
    return [NamedCount(name=name, value=value) for name, value in ranked]


def build_conversion_data(snapshot: SurveySnapshot) -> List[ConversionGroup]:
    """
    Share of each tool's users who also pay for it.

    A respondent is a user when the usage answer mentions the tool name and a
    payer when the paid-plan answer mentions the tool's paid key (and is not
    "no paid plan"). Tools with too few users are left out.
    """
    frame = snapshot.frame
    if len(frame) == 0:
        return []

    groups: List[ConversionGroup] = []
    for cat in CONVERSION_CATEGORIES:
        use_col = resolve_column(snapshot.columns, cat.use_keywords)
        paid_col = resolve_column(snapshot.columns, cat.paid_keywords)
        if use_col is None or paid_col is None:
            continue

        use_values = _column_values(frame, use_col)
        paid_values = _column_values(frame, paid_col)

        rows: List[ConversionRow] = []
        for tool in cat.tools:
            users = 0
            paid = 0
            for use_val, paid_val in zip(use_values, paid_values):
                if tool.name not in use_val:
                    continue
                users += 1
                if tool.paid_key in paid_val and NO_PAID_MARKER not in paid_val:
                    paid += 1
            if users >= MIN_CONVERSION_USERS:
                rows.append(ConversionRow(name=tool.name, users=users, paid=paid, rate=round_percent(paid, users)))

        if rows:
            rows.sort(key=lambda r: r.rate, reverse=True)
            groups.append(ConversionGroup(category=cat.name, data=rows))

    return groups


def classify_pain_point(answer: str) -> List[str]:
    lower = answer.lower()
    return [
        category
        for category, keywords in PAIN_POINT_CATEGORIES.items()
        if any(k in lower for k in keywords)
    ]


def build_pain_points(snapshot: SurveySnapshot) -> PainPoints:
    frame = snapshot.frame
    if len(frame) == 0:
        return PainPoints(top=[], all_answers=[])

    col = resolve_column(snapshot.columns, PAIN_POINT_KEYWORDS)
    if col is None:
        return PainPoints(top=[], all_answers=[])

    counts: Dict[str, int] = {category: 0 for category in PAIN_POINT_CATEGORIES}
    answers: List[str] = []
    for raw in _column_values(frame, col):
        val = raw.strip()
        if val in PAIN_POINT_IGNORED:
            continue
        answers.append(val)
        for category in classify_pain_point(val):
            counts[category] += 1

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:PAIN_POINT_TOP_N]
    top = [PainPointCount(category=c, count=n) for c, n in ranked if n > 0]
    return PainPoints(top=top, all_answers=answers)


def build_payment_distribution(snapshot: SurveySnapshot) -> List[NamedCount]:
    frame = snapshot.frame
    if len(frame) == 0:
        return []

    col_payment = resolve_column(snapshot.columns, PAYMENT_KEYWORDS)
    if col_payment is None:
        return []

    counter: Dict[str, int] = {}
    for val in _column_values(frame, col_payment):
        if val:
            counter[val] = counter.get(val, 0) + 1

    return [
        NamedCount(name=PAYMENT_SHORT_LABELS[label], value=counter[label], full_name=label)
        for label, _ in PAYMENT_BUCKETS
        if counter.get(label)
    ]


def build_dashboard(snapshot: SurveySnapshot) -> DashboardView:
    """
    Run the full aggregation pipeline over one snapshot.

    Pure and deterministic: the same snapshot always yields the same view.
    """
    cols = snapshot.columns
    resolved = {
        "affiliation": resolve_column(cols, AFFILIATION_KEYWORDS),
        "tenure": resolve_column(cols, TENURE_KEYWORDS),
        "major": resolve_column(cols, MAJOR_KEYWORDS),
        "payment": resolve_column(cols, PAYMENT_KEYWORDS),
        "pain_points": resolve_column(cols, PAIN_POINT_KEYWORDS),
    }
    for q in TOOL_QUESTIONS:
        resolved[q.key] = resolve_column(cols, q.keywords)

    view = DashboardView(
        stats=compute_group_stats(snapshot),
        tool_charts={q.key: build_question_chart(snapshot, q) for q in TOOL_QUESTIONS},
        tenure=build_tenure_payments(snapshot),
        majors=build_major_distribution(snapshot),
        conversion=build_conversion_data(snapshot),
        pain_points=build_pain_points(snapshot),
        payments=build_payment_distribution(snapshot),
        columns_resolved=resolved,
    )
    logger.info(
        "Built dashboard view: total=%d rookie=%d veteran=%d",
        view.stats.total, view.stats.rookie, view.stats.veteran,
    )
    return view
