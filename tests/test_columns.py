from __future__ import annotations

import pytest

from kpc_ai_dashboard.core.columns import resolve_column


def test_strict_match_beats_earlier_loose_match():
    headers = ["A tenure", "Q2 tenure"]
    assert resolve_column(headers, ["Q2", "tenure"]) == "Q2 tenure"


def test_first_strict_match_in_column_order_wins():
    headers = ["Q4. 사용한 대화형 AI", "Q4. 대화형 AI 중 가장 많이 사용한 도구"]
    assert resolve_column(headers, ["Q4", "대화형", "사용한"]) == "Q4. 사용한 대화형 AI"


def test_loose_fallback_returns_first_partial_match():
    headers = ["타임스탬프", "Q1. 귀하의 소속은?", "Q2. 근속 년수는?"]
    assert resolve_column(headers, ["Q2", "근무기간"]) == "Q2. 근속 년수는?"


def test_no_match_returns_none():
    assert resolve_column(["타임스탬프", "Q1. 귀하의 소속은?"], ["Q16", "금액"]) is None


def test_empty_headers_returns_none():
    assert resolve_column([], ["소속"]) is None


def test_empty_keywords_matches_first_header():
    assert resolve_column(["first", "second"], []) == "first"


@pytest.mark.parametrize(
    "headers, keywords",
    [
        (["alpha", "beta"], ["gam"]),
        (["alpha", "beta"], ["et"]),
        (["Q16. 금액", "Q1. 소속"], ["Q16", "xx"]),
        (["Q16. 금액", "Q1. 소속"], ["zz", "yy"]),
        ([], ["a"]),
    ],
)
def test_absent_iff_no_header_contains_any_keyword(headers, keywords):
    any_hit = any(k in h for h in headers for k in keywords)
    assert (resolve_column(headers, keywords) is None) == (not any_hit)


def test_resolution_is_deterministic():
    headers = ["Q6 코딩", "Q6 사용한 코딩 도구", "Q7 코딩 유료"]
    first = resolve_column(headers, ["Q6", "코딩", "사용한"])
    assert all(resolve_column(headers, ["Q6", "코딩", "사용한"]) == first for _ in range(5))
    assert first == "Q6 사용한 코딩 도구"
