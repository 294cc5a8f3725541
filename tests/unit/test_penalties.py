"""Unit tests for penalties, early repayment and prepayment"""

import pytest
from datetime import date
from decimal import Decimal
from loan_engine.domain.penalties import (
    calculate_accrued_interest,
    calculate_early_repayment,
    calculate_penalty,
    calculate_prepayment_impact,
)
from loan_engine.domain.exceptions import InvalidLoanParametersError


@pytest.mark.parametrize(
    "overdue,days,rate,expected",
    [
        (10000, 10, Decimal("0.1"), Decimal("100")),  # 10000 x 0.001 x 10
        (100000, 15, Decimal("0.05"), Decimal("750")),
        (25000, 60, Decimal("0.2"), Decimal("3000")),
    ],
)
def test_calculate_penalty(overdue, days, rate, expected):
    assert calculate_penalty(overdue, days, rate) == expected


@pytest.mark.parametrize(
    "overdue,days,rate",
    [
        (0, 10, Decimal("0.1")),
        (10000, 0, Decimal("0.1")),
        (-1000, 10, Decimal("0.1")),
        (10000, -5, Decimal("0.1")),
        (10000, 10, Decimal("0")),
    ],
)
def test_calculate_penalty_nothing_overdue_returns_zero(overdue, days, rate):
    assert calculate_penalty(overdue, days, rate) == 0


def test_calculate_penalty_rounds_to_cents():
    # 333.33 x 0.0015 x 7 = 3.499965
    assert calculate_penalty(Decimal("333.33"), 7, Decimal("0.15")) == Decimal("3.50")


def test_accrued_interest_actual_365():
    # 36,500 at 10% for 1 day = 10
    assert calculate_accrued_interest(36500, 10, 1) == Decimal("10.00")
    assert calculate_accrued_interest(36500, 10, 0) == 0
    assert calculate_accrued_interest(36500, 0, 30) == 0


def test_calculate_early_repayment():
    result = calculate_early_repayment(
        Decimal("100000"),
        Decimal("30000"),
        Decimal("12"),
        date(2024, 1, 1),
        date(2024, 7, 1),  # 182 days later (leap year)
    )

    assert result.outstanding_principal == Decimal("70000")
    # 70,000 x 12% / 365 x 182 = 4,188.49
    assert result.accrued_interest == Decimal("4188.49")
    assert result.total_early_repayment_amount == result.outstanding_principal + result.accrued_interest


def test_calculate_early_repayment_same_day_has_no_interest():
    result = calculate_early_repayment(100000, 0, 12, date(2024, 1, 1), date(2024, 1, 1))

    assert result.accrued_interest == 0
    assert result.total_early_repayment_amount == Decimal("100000")


@pytest.mark.parametrize(
    "original,paid,rate,repayment_date",
    [
        (0, 0, 12, date(2024, 7, 1)),
        (100000, -1, 12, date(2024, 7, 1)),
        (100000, 100001, 12, date(2024, 7, 1)),
        (100000, 0, -1, date(2024, 7, 1)),
        (100000, 0, 12, date(2023, 12, 31)),  # Before disbursement
    ],
)
def test_calculate_early_repayment_invalid(original, paid, rate, repayment_date):
    with pytest.raises(InvalidLoanParametersError):
        calculate_early_repayment(original, paid, rate, date(2024, 1, 1), repayment_date)


def test_prepayment_full_settlement():
    result = calculate_prepayment_impact(300000, 12, 6, 300000)

    assert result.loan_fully_paid is True
    assert result.new_outstanding_balance == 0
    assert result.interest_saved > 0
    assert result.new_monthly_emi is None


def test_prepayment_partial():
    result = calculate_prepayment_impact(300000, 12, 6, 150000)

    assert result.loan_fully_paid is False
    assert result.new_outstanding_balance == Decimal("150000")
    assert result.interest_saved > 0
    assert 0 < result.new_monthly_emi < Decimal("30000")


def test_prepayment_negative_amount():
    with pytest.raises(InvalidLoanParametersError):
        calculate_prepayment_impact(300000, 12, 6, -1)
