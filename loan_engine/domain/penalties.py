"""Late-payment penalties and early settlement"""

from datetime import date
from decimal import Decimal

from loan_engine.domain.amortization import calculate_emi, calculate_total_interest
from loan_engine.domain.exceptions import InvalidLoanParametersError
from loan_engine.domain.models import EarlyRepaymentResult, PrepaymentImpactResult
from loan_engine.domain.money import HUNDRED, ZERO, Number, round_currency, to_decimal
from loan_engine.utils.date_utils import days_between

DAYS_IN_YEAR = 365


def calculate_penalty(overdue_amount: Number, days_overdue: int, rate_per_day_percent: Number) -> Decimal:
    """
    Penalty = overdue amount * daily rate * days overdue.

    Returns 0 instead of raising when nothing is overdue (amount, days or rate
    not positive).
    """
    overdue_amount = to_decimal(overdue_amount)
    rate_per_day_percent = to_decimal(rate_per_day_percent)

    if overdue_amount <= 0 or days_overdue <= 0 or rate_per_day_percent <= 0:
        return ZERO

    return round_currency(overdue_amount * (rate_per_day_percent / HUNDRED) * days_overdue)


def calculate_accrued_interest(principal: Number, annual_rate_percent: Number, days: int) -> Decimal:
    """Simple daily accrual, Actual/365"""
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    if principal <= 0 or annual_rate_percent <= 0 or days <= 0:
        return ZERO
    return round_currency(principal * annual_rate_percent / HUNDRED / DAYS_IN_YEAR * days)


def calculate_early_repayment(
    original_principal: Number,
    principal_already_paid: Number,
    annual_rate_percent: Number,
    disbursement_date: date,
    repayment_date: date,
) -> EarlyRepaymentResult:
    """
    Settlement figure for closing a loan before maturity.

    Interest accrues daily on the outstanding principal from disbursement to
    the repayment date.

    Raises:
        InvalidLoanParametersError: negative amounts or rate, principal paid
            beyond the original principal, or repayment before disbursement
    """
    original_principal = to_decimal(original_principal)
    principal_already_paid = to_decimal(principal_already_paid)
    annual_rate_percent = to_decimal(annual_rate_percent)

    errors = []
    if original_principal <= 0:
        errors.append("Principal must be greater than zero")
    if principal_already_paid < 0:
        errors.append("Principal already paid cannot be negative")
    if principal_already_paid > original_principal:
        errors.append("Principal already paid exceeds original principal")
    if annual_rate_percent < 0:
        errors.append("Interest rate cannot be negative")
    if repayment_date < disbursement_date:
        errors.append("Repayment date precedes disbursement date")
    if errors:
        raise InvalidLoanParametersError(errors)

    outstanding = original_principal - principal_already_paid
    accrued = calculate_accrued_interest(
        outstanding, annual_rate_percent, days_between(disbursement_date, repayment_date)
    )

    return EarlyRepaymentResult(
        outstanding_principal=outstanding,
        accrued_interest=accrued,
        total_early_repayment_amount=outstanding + accrued,
    )


def calculate_prepayment_impact(
    outstanding_principal: Number,
    annual_rate_percent: Number,
    remaining_term_months: int,
    prepayment_amount: Number,
) -> PrepaymentImpactResult:
    """
    Re-amortize the remaining term after a lump-sum prepayment.

    interest_saved compares interest on the current balance with interest on
    the reduced balance over the same remaining term.
    """
    outstanding_principal = to_decimal(outstanding_principal)
    prepayment_amount = to_decimal(prepayment_amount)
    if prepayment_amount < 0:
        raise InvalidLoanParametersError("Prepayment amount cannot be negative")

    interest_before = calculate_total_interest(outstanding_principal, annual_rate_percent, remaining_term_months)
    new_outstanding = max(ZERO, outstanding_principal - prepayment_amount)

    if new_outstanding == 0:
        return PrepaymentImpactResult(
            new_outstanding_balance=ZERO,
            interest_saved=interest_before,
            loan_fully_paid=True,
            new_monthly_emi=None,
        )

    interest_after = calculate_total_interest(new_outstanding, annual_rate_percent, remaining_term_months)
    return PrepaymentImpactResult(
        new_outstanding_balance=new_outstanding,
        interest_saved=round_currency(interest_before - interest_after),
        loan_fully_paid=False,
        new_monthly_emi=calculate_emi(new_outstanding, annual_rate_percent, remaining_term_months),
    )
