"""Unit tests for EMI and amortization schedules"""

import pytest
from datetime import date
from decimal import Decimal
from loan_engine.domain.amortization import (
    calculate_emi,
    calculate_flat_rate_summary,
    calculate_installment_breakdown,
    calculate_loan_summary,
    calculate_outstanding_balance,
    calculate_total_interest,
    calculate_total_repayable,
    estimate_loan_cost,
    generate_amortization_schedule,
    generate_flat_rate_schedule,
    validate_loan_parameters,
)
from loan_engine.domain.exceptions import InvalidLoanParametersError


def test_calculate_emi_reducing_balance():
    """100,000 at 12% over 12 months"""
    assert calculate_emi(Decimal("100000"), Decimal("12"), 12) == Decimal("8884.88")


def test_calculate_emi_zero_rate_is_simple_division():
    assert calculate_emi(Decimal("120000"), Decimal("0"), 12) == Decimal("10000")


def test_calculate_emi_accepts_int_and_float_inputs():
    assert calculate_emi(100000, 12.0, 12) == Decimal("8884.88")


@pytest.mark.parametrize(
    "principal,rate,term",
    [
        (0, 12, 12),  # Zero principal
        (-100000, 12, 12),  # Negative principal
        (100000, -5, 12),  # Negative rate
        (100000, 12, 0),  # Zero tenure
        (100000, 12, -6),  # Negative tenure
    ],
)
def test_calculate_emi_invalid_inputs(principal, rate, term):
    with pytest.raises(InvalidLoanParametersError):
        calculate_emi(principal, rate, term)


def test_invalid_parameters_error_is_value_error():
    with pytest.raises(ValueError) as exc_info:
        calculate_emi(0, -1, 0)

    assert exc_info.value.errors == [
        "Principal must be greater than zero",
        "Interest rate cannot be negative",
        "Tenure must be greater than zero",
    ]


def test_total_interest_and_repayable():
    # 8,884.88 x 12 = 106,618.56
    assert calculate_total_interest(100000, 12, 12) == Decimal("6618.56")
    assert calculate_total_repayable(100000, 12, 12) == Decimal("106618.56")


def test_total_interest_zero_rate_is_exactly_zero():
    """100,000 / 12 does not divide evenly, but a 0% loan still costs nothing"""
    assert calculate_total_interest(100000, 0, 12) == Decimal("0")
    assert calculate_total_repayable(100000, 0, 12) == Decimal("100000")


def test_schedule_length_and_first_installment():
    schedule = generate_amortization_schedule(100000, 12, 12, date(2024, 1, 1))

    assert len(schedule) == 12
    first = schedule[0]
    assert first.installment_index == 1
    assert first.opening_balance == Decimal("100000")
    assert first.interest_portion == Decimal("1000.00")
    assert first.principal_portion == Decimal("7884.88")
    assert first.remaining_balance == Decimal("92115.12")


def test_schedule_closes_at_zero_and_repays_principal():
    schedule = generate_amortization_schedule(100000, 12, 12, date(2024, 1, 1))

    assert schedule[-1].remaining_balance == Decimal("0")
    assert sum(entry.principal_portion for entry in schedule) == Decimal("100000")


def test_schedule_has_flat_emi():
    schedule = generate_amortization_schedule(250000, Decimal("18.5"), 24, date(2024, 1, 1))
    assert len({entry.emi_amount for entry in schedule}) == 1


def test_schedule_interest_is_front_loaded():
    schedule = generate_amortization_schedule(100000, 12, 12, date(2024, 1, 1))

    assert schedule[0].interest_portion > schedule[-1].interest_portion
    assert schedule[0].principal_portion < schedule[-1].principal_portion


def test_schedule_entries_balance_except_last():
    schedule = generate_amortization_schedule(100000, 12, 12, date(2024, 1, 1))

    for entry in schedule[:-1]:
        assert entry.interest_portion + entry.principal_portion == entry.emi_amount
    for previous, entry in zip(schedule, schedule[1:]):
        assert entry.opening_balance == previous.remaining_balance


def test_schedule_zero_rate_last_installment_absorbs_remainder():
    """100,000 / 12 = 8,333.33; the last installment picks up the 4 leftover cents"""
    schedule = generate_amortization_schedule(100000, 0, 12, date(2024, 1, 1))

    assert all(entry.interest_portion == 0 for entry in schedule)
    assert schedule[0].principal_portion == Decimal("8333.33")
    assert schedule[-1].principal_portion == Decimal("8333.37")
    assert schedule[-1].remaining_balance == 0


def test_schedule_due_dates_are_calendar_months():
    schedule = generate_amortization_schedule(100000, 12, 6, date(2024, 1, 1))

    assert schedule[0].due_date == date(2024, 2, 1)
    assert schedule[1].due_date == date(2024, 3, 1)
    assert schedule[5].due_date == date(2024, 7, 1)


def test_schedule_due_dates_clamp_to_month_end():
    """Month-end disbursement keeps returning to the 31st where the month has one"""
    schedule = generate_amortization_schedule(100000, 12, 3, date(2024, 1, 31))

    assert [entry.due_date for entry in schedule] == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_schedule_invalid_inputs():
    with pytest.raises(InvalidLoanParametersError):
        generate_amortization_schedule(0, 12, 12, date(2024, 1, 1))


def test_loan_summary():
    summary = calculate_loan_summary(100000, 12, 12, date(2024, 1, 1))

    assert summary.principal == Decimal("100000")
    assert summary.annual_interest_rate_percent == Decimal("12")
    assert summary.term_months == 12
    assert summary.monthly_emi == Decimal("8884.88")
    assert summary.total_interest == Decimal("6618.56")
    assert summary.total_repayable == summary.principal + summary.total_interest
    assert len(summary.schedule) == 12
    assert summary.first_payment_date == date(2024, 2, 1)
    assert summary.last_payment_date == date(2025, 1, 1)


@pytest.mark.parametrize(
    "principal,rate,term,emi_range,interest_range",
    [
        (200000, 15, 12, (18000, 18500), (16000, 17000)),  # Normal loan
        (500000, 10, 24, (23000, 24000), (52000, 55000)),  # Commodity loan
        (2000000, 18, 36, (72000, 73000), (590000, 620000)),  # Car loan
    ],
)
def test_loan_summary_real_world_products(principal, rate, term, emi_range, interest_range):
    summary = calculate_loan_summary(principal, rate, term, date(2024, 1, 15))

    assert emi_range[0] <= summary.monthly_emi <= emi_range[1]
    assert interest_range[0] <= summary.total_interest <= interest_range[1]
    assert len(summary.schedule) == term
    assert summary.schedule[-1].remaining_balance == 0


def test_flat_rate_schedule():
    """120,000 at 10% flat for 12 months: 12,000 interest, 1,000 a month"""
    schedule = generate_flat_rate_schedule(120000, 10, 12, date(2024, 1, 1))

    assert len(schedule) == 12
    assert all(entry.interest_portion == Decimal("1000") for entry in schedule)
    assert all(entry.emi_amount == Decimal("11000") for entry in schedule)
    assert schedule[-1].remaining_balance == 0


def test_flat_rate_summary_totals():
    summary = calculate_flat_rate_summary(100000, 10, 12, date(2024, 1, 1))

    assert sum(entry.principal_portion for entry in summary.schedule) == Decimal("100000")
    assert summary.total_interest == Decimal("10000.00")
    assert summary.total_repayable == Decimal("110000.00")


def test_outstanding_balance():
    assert calculate_outstanding_balance(500000, 12, 12, 0) == Decimal("500000")
    assert calculate_outstanding_balance(500000, 12, 12, 12) == Decimal("0")

    midway = calculate_outstanding_balance(500000, 12, 12, 6)
    assert 0 < midway < Decimal("500000")


def test_outstanding_balance_matches_schedule():
    schedule = generate_amortization_schedule(100000, 12, 12, date(2024, 1, 1))
    assert calculate_outstanding_balance(100000, 12, 12, 1) == schedule[0].remaining_balance


def test_installment_breakdown():
    breakdown = calculate_installment_breakdown(Decimal("100000"), Decimal("0.01"), Decimal("8884.88"))

    assert breakdown.interest_amount == Decimal("1000.00")
    assert breakdown.principal_amount == Decimal("7884.88")
    assert breakdown.total_payment == Decimal("8884.88")
    assert breakdown.remaining_balance == Decimal("92115.12")


def test_installment_breakdown_never_goes_negative():
    breakdown = calculate_installment_breakdown(Decimal("500"), Decimal("0.01"), Decimal("8884.88"))
    assert breakdown.remaining_balance == 0


def test_estimate_loan_cost():
    estimate = estimate_loan_cost(100000, 12, 12, Decimal("1.5"))

    assert estimate.total_interest == Decimal("6618.56")
    assert estimate.processing_fee == Decimal("1500.00")
    assert estimate.total_cost == Decimal("8118.56")
    assert estimate.total_payable == Decimal("108118.56")
    # 6,618.56 / 100,000 over one year
    assert estimate.effective_annual_rate_percent == Decimal("6.62")


def test_validate_loan_parameters_valid():
    result = validate_loan_parameters(500000, 12, 12)

    assert result.is_valid is True
    assert result.errors == []


@pytest.mark.parametrize(
    "principal,rate,term,expected_error",
    [
        (0, 12, 12, "Principal must be greater than zero"),
        (-100000, 12, 12, "Principal must be greater than zero"),
        (200000000, 12, 12, "Principal exceeds maximum"),
        (100000, -5, 12, "Interest rate cannot be negative"),
        (100000, 150, 12, "Interest rate exceeds maximum"),
        (100000, 12, 0, "Tenure must be greater than zero"),
        (100000, 12, 400, "Tenure exceeds maximum"),
    ],
)
def test_validate_loan_parameters_invalid(principal, rate, term, expected_error):
    result = validate_loan_parameters(principal, rate, term)

    assert result.is_valid is False
    assert any(expected_error in error for error in result.errors)


def test_schedule_tiny_principal_never_overpays():
    """EMI rounds 0.015 up to 0.02, so 0.30 is cleared after 15 of 20 installments"""
    schedule = generate_amortization_schedule(Decimal("0.30"), 0, 20, date(2024, 1, 1))

    assert all(entry.remaining_balance >= 0 for entry in schedule)
    assert all(entry.principal_portion >= 0 for entry in schedule)
    assert schedule[14].remaining_balance == 0
    assert all(entry.principal_portion == 0 for entry in schedule[15:])
    assert sum(entry.principal_portion for entry in schedule) == Decimal("0.30")
