from __future__ import annotations

import pytest

from kpc_ai_dashboard.core.payments import average_spend, paid_count, paid_rate, payment_midpoint


@pytest.mark.parametrize(
    "label, expected",
    [
        ("0원 (유료 결제 없음)", 0.0),
        ("0원 초과 ~ 5만원 미만", 2.5),
        ("5만원 이상 ~ 10만원 미만", 7.5),
        ("10만원 이상 ~ 20만원 미만", 15.0),
        ("20만원 이상", 25.0),
        ("", 0.0),
        ("잘 모르겠음", 0.0),
    ],
)
def test_payment_midpoint(label, expected):
    assert payment_midpoint(label) == expected


def test_average_spend_and_paid_rate():
    values = ["0원 (유료 결제 없음)", "20만원 이상", "5만원 이상 ~ 10만원 미만", ""]
    assert average_spend(values) == pytest.approx((0 + 25 + 7.5 + 0) / 4)
    assert paid_rate(values) == pytest.approx(0.5)
    assert paid_count(values) == 2


def test_average_spend_is_order_invariant():
    values = ["20만원 이상", "0원 초과 ~ 5만원 미만", "10만원 이상 ~ 20만원 미만", "0원 (유료 결제 없음)"]
    assert average_spend(values) == average_spend(list(reversed(values)))
    assert average_spend(values) == average_spend(sorted(values))


def test_empty_inputs_are_zero():
    assert average_spend([]) == 0.0
    assert paid_rate([]) == 0.0
    assert paid_count([]) == 0
