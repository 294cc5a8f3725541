"""Underwriting checks - affordability, loan capacity, credit score and eligibility"""

from datetime import date
from decimal import Decimal
from typing import List

from loan_engine.domain.models import (
    DeductionAnalysisResult,
    DeductionRateImpact,
    EligibilityCheckResult,
    LoanCapacityResult,
    LoanStatus,
    LoanType,
    MemberProfile,
    RiskRating,
    SavingsAnalysisResult,
)
from loan_engine.domain.money import HUNDRED, ZERO, Number, round_currency, to_decimal
from loan_engine.utils.date_utils import whole_months_elapsed

BASE_CREDIT_SCORE = Decimal("50")
DEFAULT_MAX_DEDUCTION_RATE_PERCENT = Decimal("40")
DEFAULT_MIN_SAVINGS_RATIO = Decimal("0.25")
DEFAULT_CAPACITY_CEILING_PER_MULTIPLIER = Decimal("1000000")
DEFAULT_RECOMMENDED_RATIO = Decimal("0.9")
DEFAULT_MIN_CREDIT_SCORE = Decimal("60")
DEFAULT_MAX_ACTIVE_LOANS = 2
DEFAULT_COMMITTEE_REVIEW_THRESHOLD = Decimal("5000000")


def _money(amount: Decimal, currency: str) -> str:
    return f"{currency}{amount:,.2f}"


def calculate_deduction_rate_impact(
    net_income: Number,
    existing_deductions: Number,
    proposed_emi: Number,
    max_rate_percent: Number,
) -> DeductionRateImpact:
    """
    Share of monthly income consumed by loan repayments once the new EMI is added.

    Example:
        income 200,000, existing 50,000, proposed 30,000, max 45%
        -> 40%, within limit, headroom 10,000 (90,000 - 80,000)
    """
    net_income = to_decimal(net_income)
    max_rate_percent = to_decimal(max_rate_percent)
    total_deductions = to_decimal(existing_deductions) + to_decimal(proposed_emi)
    headroom = round_currency(net_income * max_rate_percent / HUNDRED - total_deductions)

    # No income means any deduction is unaffordable
    if net_income <= 0:
        return DeductionRateImpact(
            deduction_rate_percentage=HUNDRED,
            is_within_limit=False,
            remaining_headroom=headroom,
        )

    # Limit is judged on the reported (2 dp) rate
    rate_percent = round_currency(total_deductions / net_income * HUNDRED)
    return DeductionRateImpact(
        deduction_rate_percentage=rate_percent,
        is_within_limit=rate_percent <= max_rate_percent,
        remaining_headroom=headroom,
    )


def analyze_deduction_compliance(
    current_deductions: Number,
    proposed_emi: Number,
    monthly_income: Number,
    max_rate_percent: Number = DEFAULT_MAX_DEDUCTION_RATE_PERCENT,
) -> DeductionAnalysisResult:
    """Regulatory sign-off view of the deduction rate (CBN cap defaults to 40%)"""
    current_deductions = to_decimal(current_deductions)
    proposed_emi = to_decimal(proposed_emi)
    monthly_income = to_decimal(monthly_income)
    max_rate_percent = to_decimal(max_rate_percent)

    impact = calculate_deduction_rate_impact(monthly_income, current_deductions, proposed_emi, max_rate_percent)

    if impact.is_within_limit:
        status = "Compliant"
        message = f"Deduction {impact.deduction_rate_percentage}% is within the {max_rate_percent}% limit"
    else:
        status = "Exceeds limit"
        message = f"Deduction {impact.deduction_rate_percentage}% exceeds the {max_rate_percent}% maximum"

    return DeductionAnalysisResult(
        requested_monthly_deduction=proposed_emi,
        member_monthly_income=monthly_income,
        current_deductions=current_deductions,
        total_deductions_after_loan=current_deductions + proposed_emi,
        max_allowed_deduction=round_currency(monthly_income * max_rate_percent / HUNDRED),
        deduction_percentage=impact.deduction_rate_percentage,
        remaining_headroom=impact.remaining_headroom,
        is_compliant=impact.is_within_limit,
        compliance_status=status,
        message=message,
    )


def calculate_member_loan_capacity(
    member: MemberProfile,
    loan_type: LoanType,
    ceiling_per_multiplier: Number = DEFAULT_CAPACITY_CEILING_PER_MULTIPLIER,
    recommended_ratio: Number = DEFAULT_RECOMMENDED_RATIO,
    currency: str = "₦",
) -> LoanCapacityResult:
    """
    Borrowing capacity from savings.

    - Max loan: savings x loan-type multiplier, capped at multiplier x ceiling
    - Recommended: a conservative share (90%) of the max
    - Eligible: savings meet the loan type's minimum
    """
    savings = member.current_savings
    multiplier = loan_type.max_loan_multiplier

    max_loan = savings * multiplier
    if multiplier > 0:
        max_loan = min(max_loan, multiplier * to_decimal(ceiling_per_multiplier))
    max_loan = round_currency(max(ZERO, max_loan))

    meets_savings = savings >= loan_type.minimum_savings_required
    if meets_savings:
        notes = "Member meets savings requirements"
    else:
        notes = (
            f"Member savings ({_money(savings, currency)}) below requirement "
            f"({_money(loan_type.minimum_savings_required, currency)})"
        )

    return LoanCapacityResult(
        member_id=member.member_id,
        is_eligible=meets_savings,
        eligibility_notes=notes,
        current_savings=savings,
        max_loan_multiplier=multiplier,
        max_loan_amount=max_loan,
        recommended_loan_amount=round_currency(max_loan * to_decimal(recommended_ratio)),
    )


def calculate_member_credit_score(member: MemberProfile) -> Decimal:
    """
    Heuristic credit score from 0 (worst) to 100 (best).

    Scoring:
    - Base 50; members without loan history stay at exactly 50
    - +5 per closed loan (max +20)
    - -10 per written-off loan (max -20)
    - Per active/closed loan: +5 if never late, else -2 per late repayment (max -10)
    - +10 when the member holds any savings
    """
    if not member.loans:
        return BASE_CREDIT_SCORE

    score = BASE_CREDIT_SCORE

    closed = len(member.loans_with_status(LoanStatus.CLOSED))
    score += min(closed * 5, 20)

    written_off = len(member.loans_with_status(LoanStatus.WRITTEN_OFF))
    score -= min(written_off * 10, 20)

    for loan in member.loans_with_status(LoanStatus.ACTIVE, LoanStatus.CLOSED):
        if loan.late_repayments == 0:
            score += 5
        else:
            score -= min(loan.late_repayments * 2, 10)

    if member.current_savings > 0:
        score += 10

    return max(ZERO, min(HUNDRED, score))


def determine_risk_rating(credit_score: Decimal) -> RiskRating:
    """
    Map credit score to risk bands:
    - 80+:   Low
    - 60-80: Medium
    - 40-60: High
    - <40:   Critical
    """
    if credit_score >= 80:
        return RiskRating.LOW
    elif credit_score >= 60:
        return RiskRating.MEDIUM
    elif credit_score >= 40:
        return RiskRating.HIGH
    else:
        return RiskRating.CRITICAL


def analyze_savings_requirement(
    member: MemberProfile,
    loan_type: LoanType,
    requested_amount: Number,
    min_savings_ratio: Number = DEFAULT_MIN_SAVINGS_RATIO,
    currency: str = "₦",
) -> SavingsAnalysisResult:
    """Savings adequacy: absolute minimum for the loan type and savings-to-loan ratio"""
    requested_amount = to_decimal(requested_amount)
    min_savings_ratio = to_decimal(min_savings_ratio)
    savings = member.current_savings
    minimum = loan_type.minimum_savings_required

    ratio = savings / (requested_amount if requested_amount > 0 else Decimal("1"))
    meets_minimum = savings >= minimum
    meets_ratio = ratio >= min_savings_ratio

    if meets_minimum and meets_ratio:
        message = f"Member meets requirements: {_money(savings, currency)} savings, {ratio:.2%} ratio"
    else:
        message = (
            f"Member falls short: {_money(savings, currency)} savings (need {_money(minimum, currency)}), "
            f"{ratio:.2%} ratio (need {min_savings_ratio:.2%})"
        )

    return SavingsAnalysisResult(
        member_id=member.member_id,
        current_savings=savings,
        minimum_savings_required=minimum,
        savings_to_loan_ratio=round_currency(ratio),
        minimum_savings_ratio_required=min_savings_ratio,
        meets_minimum_savings=meets_minimum,
        meets_minimum_ratio=meets_ratio,
        analysis_message=message,
    )


def check_member_eligibility(
    member: MemberProfile,
    loan_type: LoanType,
    requested_amount: Number,
    as_of: date,
    min_credit_score: Number = DEFAULT_MIN_CREDIT_SCORE,
    max_active_loans: int = DEFAULT_MAX_ACTIVE_LOANS,
    committee_review_threshold: Number = DEFAULT_COMMITTEE_REVIEW_THRESHOLD,
    min_savings_ratio: Number = DEFAULT_MIN_SAVINGS_RATIO,
    currency: str = "₦",
) -> EligibilityCheckResult:
    """
    Aggregate underwriting decision.

    Criteria: credit score, membership duration (against the loan type's
    minimum term), savings adequacy and the active-loan limit. Committee review
    is required when any criterion fails, risk is not Low, or the amount is
    above the high-value threshold.
    """
    requested_amount = to_decimal(requested_amount)
    passed: List[str] = []
    failed: List[str] = []

    credit_score = calculate_member_credit_score(member)
    if credit_score >= to_decimal(min_credit_score):
        passed.append("Good credit score")
    else:
        failed.append(f"Low credit score: {credit_score}")

    # Membership duration is only assessed when the join date is on record
    if member.member_since is not None:
        membership_months = whole_months_elapsed(member.member_since, as_of)
        if membership_months >= loan_type.min_loan_term_months:
            passed.append("Sufficient membership period")
        else:
            failed.append(f"Insufficient membership period: {membership_months} months")

    savings = analyze_savings_requirement(member, loan_type, requested_amount, min_savings_ratio, currency)
    if savings.meets_requirements:
        passed.append("Meets savings requirement")
    else:
        failed.append("Insufficient savings")

    active_loans = len(member.loans_with_status(LoanStatus.ACTIVE))
    if active_loans < max_active_loans:
        passed.append("Active loans within limits")
    else:
        failed.append(f"Too many active loans: {active_loans}")

    risk_rating = determine_risk_rating(credit_score)
    requires_review = (
        bool(failed)
        or risk_rating != RiskRating.LOW
        or requested_amount > to_decimal(committee_review_threshold)
    )

    return EligibilityCheckResult(
        member_id=member.member_id,
        is_eligible=not failed and risk_rating != RiskRating.CRITICAL,
        credit_score=credit_score,
        risk_rating=risk_rating,
        passed_criteria=passed,
        failed_criteria=failed,
        requires_committee_review=requires_review,
        message=(
            f"Eligibility concerns: {', '.join(failed)}"
            if failed
            else "Member meets all eligibility criteria"
        ),
    )
