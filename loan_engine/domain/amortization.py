"""Reducing-balance amortization: EMI, schedules and loan totals"""

from datetime import date
from decimal import Decimal
from typing import List

from loan_engine.domain.exceptions import InvalidLoanParametersError
from loan_engine.domain.models import (
    InstallmentBreakdown,
    LoanCostEstimate,
    LoanSummary,
    RepaymentScheduleEntry,
    ValidationResult,
)
from loan_engine.domain.money import HUNDRED, ZERO, Number, monthly_rate, round_currency, to_decimal
from loan_engine.utils.date_utils import add_months

MAX_PRINCIPAL = Decimal("100000000")
MAX_ANNUAL_RATE_PERCENT = Decimal("100")
MAX_TERM_MONTHS = 360


def _require_valid_terms(principal: Decimal, annual_rate_percent: Decimal, term_months: int) -> None:
    errors = []
    if principal <= 0:
        errors.append("Principal must be greater than zero")
    if annual_rate_percent < 0:
        errors.append("Interest rate cannot be negative")
    if term_months <= 0:
        errors.append("Tenure must be greater than zero")
    if errors:
        raise InvalidLoanParametersError(errors)


def validate_loan_parameters(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    max_principal: Decimal = MAX_PRINCIPAL,
    max_rate_percent: Decimal = MAX_ANNUAL_RATE_PERCENT,
    max_term_months: int = MAX_TERM_MONTHS,
) -> ValidationResult:
    """
    Check loan terms against product limits without raising.

    Used by origination screens to list every problem at once; the
    calculators themselves only reject values they cannot compute with.
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    errors = []

    if principal <= 0:
        errors.append("Principal must be greater than zero")
    if principal > max_principal:
        errors.append("Principal exceeds maximum allowed amount")
    if annual_rate_percent < 0:
        errors.append("Interest rate cannot be negative")
    if annual_rate_percent > max_rate_percent:
        errors.append(f"Interest rate exceeds maximum allowed ({max_rate_percent}%)")
    if term_months <= 0:
        errors.append("Tenure must be greater than zero")
    if term_months > max_term_months:
        errors.append(f"Tenure exceeds maximum allowed ({max_term_months} months)")

    return ValidationResult(is_valid=not errors, errors=errors)


def calculate_emi(principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
    """
    Equated monthly installment under reducing balance.

    Formula: EMI = P * r * (1 + r)^n / ((1 + r)^n - 1)
    Where: P = principal, r = monthly rate, n = number of months

    Zero-rate loans divide principal evenly across the term.

    Raises:
        InvalidLoanParametersError: principal <= 0, rate < 0 or term <= 0

    Example:
        100,000 at 12% over 12 months -> 8,884.88
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    _require_valid_terms(principal, annual_rate_percent, term_months)

    rate = monthly_rate(annual_rate_percent)
    if rate == 0:
        return round_currency(principal / term_months)

    factor = (1 + rate) ** term_months
    return round_currency(principal * rate * factor / (factor - 1))


def calculate_total_interest(principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
    """Interest paid over the life of the loan (EMI * n - P); exactly zero at 0%"""
    principal = to_decimal(principal)
    emi = calculate_emi(principal, annual_rate_percent, term_months)
    if to_decimal(annual_rate_percent) == 0:
        return ZERO
    return round_currency(emi * term_months - principal)


def calculate_total_repayable(principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
    principal = to_decimal(principal)
    return round_currency(principal + calculate_total_interest(principal, annual_rate_percent, term_months))


def generate_amortization_schedule(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    start_date: date,
) -> List[RepaymentScheduleEntry]:
    """
    Build the month-by-month repayment schedule.

    - Installment i falls due i calendar months after start_date (disbursement)
    - Interest each month is the outstanding balance times the monthly rate
    - Every entry carries the same EMI; the last installment's principal is the
      whole remaining balance so the schedule closes at exactly zero
    """
    principal = to_decimal(principal)
    emi = calculate_emi(principal, annual_rate_percent, term_months)
    rate = monthly_rate(annual_rate_percent)

    schedule = []
    balance = principal
    for month in range(1, term_months + 1):
        interest = round_currency(balance * rate)

        # Last installment absorbs rounding drift
        if month == term_months:
            principal_portion = balance
        else:
            # Never repay more than is owed; a rounded-up EMI on a tiny loan clears it early
            principal_portion = min(emi - interest, balance)

        remaining = balance - principal_portion
        schedule.append(
            RepaymentScheduleEntry(
                installment_index=month,
                due_date=add_months(start_date, month),
                opening_balance=balance,
                emi_amount=emi,
                interest_portion=interest,
                principal_portion=principal_portion,
                remaining_balance=remaining,
            )
        )
        balance = remaining

    return schedule


def generate_flat_rate_schedule(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    start_date: date,
) -> List[RepaymentScheduleEntry]:
    """
    Flat-rate alternative: interest is charged on the original principal for the
    whole term and spread evenly. The last installment absorbs cent remainders
    of both components.
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    _require_valid_terms(principal, annual_rate_percent, term_months)

    total_interest = round_currency(principal * annual_rate_percent / HUNDRED * term_months / 12)
    principal_share = round_currency(principal / term_months)
    interest_share = round_currency(total_interest / term_months)
    installment = principal_share + interest_share

    schedule = []
    balance = principal
    interest_left = total_interest
    for month in range(1, term_months + 1):
        if month == term_months:
            principal_portion, interest_portion = balance, interest_left
        else:
            principal_portion, interest_portion = principal_share, interest_share

        schedule.append(
            RepaymentScheduleEntry(
                installment_index=month,
                due_date=add_months(start_date, month),
                opening_balance=balance,
                emi_amount=installment,
                interest_portion=interest_portion,
                principal_portion=principal_portion,
                remaining_balance=balance - principal_portion,
            )
        )
        balance -= principal_portion
        interest_left -= interest_portion

    return schedule


def calculate_loan_summary(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    start_date: date,
) -> LoanSummary:
    """EMI, totals and full schedule in one record"""
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    schedule = generate_amortization_schedule(principal, annual_rate_percent, term_months, start_date)
    total_interest = calculate_total_interest(principal, annual_rate_percent, term_months)

    return LoanSummary(
        principal=principal,
        annual_interest_rate_percent=annual_rate_percent,
        term_months=term_months,
        monthly_emi=schedule[0].emi_amount,
        total_interest=total_interest,
        total_repayable=round_currency(principal + total_interest),
        schedule=schedule,
        first_payment_date=schedule[0].due_date,
        last_payment_date=schedule[-1].due_date,
    )


def calculate_flat_rate_summary(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    start_date: date,
) -> LoanSummary:
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    schedule = generate_flat_rate_schedule(principal, annual_rate_percent, term_months, start_date)
    total_interest = sum((entry.interest_portion for entry in schedule), ZERO)

    return LoanSummary(
        principal=principal,
        annual_interest_rate_percent=annual_rate_percent,
        term_months=term_months,
        monthly_emi=schedule[0].emi_amount,
        total_interest=total_interest,
        total_repayable=principal + total_interest,
        schedule=schedule,
        first_payment_date=schedule[0].due_date,
        last_payment_date=schedule[-1].due_date,
    )


def calculate_outstanding_balance(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    payments_made: int,
) -> Decimal:
    """Scheduled principal still owed after `payments_made` installments"""
    principal = to_decimal(principal)
    if payments_made >= term_months:
        return ZERO
    if payments_made <= 0:
        return principal

    # Due dates are irrelevant here; any anchor date works
    schedule = generate_amortization_schedule(principal, annual_rate_percent, term_months, date(2000, 1, 1))
    return max(ZERO, schedule[payments_made - 1].remaining_balance)


def calculate_installment_breakdown(
    outstanding_balance: Number,
    monthly_interest_rate: Number,
    emi_amount: Number,
) -> InstallmentBreakdown:
    """Split one installment against the current balance; monthly_interest_rate is a fraction"""
    outstanding_balance = to_decimal(outstanding_balance)
    emi_amount = to_decimal(emi_amount)

    interest = round_currency(outstanding_balance * to_decimal(monthly_interest_rate))
    principal_portion = round_currency(emi_amount - interest)

    return InstallmentBreakdown(
        interest_amount=interest,
        principal_amount=principal_portion,
        total_payment=emi_amount,
        remaining_balance=max(ZERO, outstanding_balance - principal_portion),
    )


def estimate_loan_cost(
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    processing_fee_percent: Number = ZERO,
) -> LoanCostEstimate:
    """
    Borrower's all-in cost: interest plus a processing fee charged on principal.

    effective_annual_rate_percent annualizes total interest over principal
    (simple, not compounded).
    """
    principal = to_decimal(principal)
    total_interest = calculate_total_interest(principal, annual_rate_percent, term_months)
    processing_fee = round_currency(principal * to_decimal(processing_fee_percent) / HUNDRED)

    return LoanCostEstimate(
        principal=principal,
        total_interest=total_interest,
        processing_fee=processing_fee,
        total_cost=total_interest + processing_fee,
        total_payable=round_currency(principal + total_interest + processing_fee),
        effective_annual_rate_percent=round_currency(total_interest / principal * 12 / term_months * HUNDRED),
    )
