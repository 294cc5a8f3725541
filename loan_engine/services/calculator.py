"""LoanCalculatorService - stateless entry point used by application services"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from loan_engine.config import Settings, settings as default_settings
from loan_engine.domain import allocation, amortization, eligibility, penalties
from loan_engine.domain.data_source import MemberDataSource
from loan_engine.domain.models import (
    DeductionAnalysisResult,
    DeductionRateImpact,
    EarlyRepaymentResult,
    EligibilityCheckResult,
    InstallmentBreakdown,
    LoanCapacityResult,
    LoanCostEstimate,
    LoanSummary,
    PaymentAllocationResult,
    PrepaymentImpactResult,
    RepaymentScheduleEntry,
    RiskRating,
    SavingsAnalysisResult,
    ValidationResult,
)
from loan_engine.domain.money import ZERO, Number, to_decimal
from loan_engine.infrastructure.observability.logging import log_eligibility

logger = logging.getLogger(__name__)

MEMBER_NOT_FOUND = "Member not found"
LOAN_TYPE_NOT_FOUND = "Loan type not found"


class LoanCalculatorService:
    """
    Loan calculation engine.

    Pure calculations (EMI, schedules, penalties, allocation) are synchronous
    and raise InvalidLoanParametersError on bad numeric input. Member-based
    checks are async, read through the injected data source, and answer
    "not found" instead of raising when a record is missing. Storage errors
    from the data source propagate unchanged.
    """

    def __init__(self, data_source: MemberDataSource, config: Settings | None = None):
        self.data_source = data_source
        self.settings = config or default_settings

    # Amortization

    def validate_loan_parameters(self, principal: Number, annual_rate_percent: Number, term_months: int) -> ValidationResult:
        return amortization.validate_loan_parameters(
            principal,
            annual_rate_percent,
            term_months,
            max_principal=self.settings.max_principal,
            max_rate_percent=self.settings.max_annual_interest_rate_percent,
            max_term_months=self.settings.max_term_months,
        )

    def calculate_emi(self, principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
        emi = amortization.calculate_emi(principal, annual_rate_percent, term_months)
        logger.info(
            "EMI calculated",
            extra={
                "step": "calculate_emi",
                "principal": str(principal),
                "annual_rate_percent": str(annual_rate_percent),
                "term_months": term_months,
                "emi": str(emi),
            },
        )
        return emi

    def calculate_total_interest(self, principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
        return amortization.calculate_total_interest(principal, annual_rate_percent, term_months)

    def calculate_total_repayable(self, principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
        return amortization.calculate_total_repayable(principal, annual_rate_percent, term_months)

    def generate_amortization_schedule(
        self, principal: Number, annual_rate_percent: Number, term_months: int, start_date: date
    ) -> List[RepaymentScheduleEntry]:
        return amortization.generate_amortization_schedule(principal, annual_rate_percent, term_months, start_date)

    def calculate_loan_summary(
        self, principal: Number, annual_rate_percent: Number, term_months: int, start_date: date
    ) -> LoanSummary:
        summary = amortization.calculate_loan_summary(principal, annual_rate_percent, term_months, start_date)
        logger.info(
            "Amortization schedule generated",
            extra={
                "step": "loan_summary",
                "principal": str(summary.principal),
                "term_months": summary.term_months,
                "total_interest": str(summary.total_interest),
                "total_repayable": str(summary.total_repayable),
            },
        )
        return summary

    def calculate_flat_rate_summary(
        self, principal: Number, annual_rate_percent: Number, term_months: int, start_date: date
    ) -> LoanSummary:
        return amortization.calculate_flat_rate_summary(principal, annual_rate_percent, term_months, start_date)

    def calculate_outstanding_balance(
        self, principal: Number, annual_rate_percent: Number, term_months: int, payments_made: int
    ) -> Decimal:
        return amortization.calculate_outstanding_balance(principal, annual_rate_percent, term_months, payments_made)

    def calculate_installment_breakdown(
        self, outstanding_balance: Number, monthly_interest_rate: Number, emi_amount: Number
    ) -> InstallmentBreakdown:
        return amortization.calculate_installment_breakdown(outstanding_balance, monthly_interest_rate, emi_amount)

    def estimate_loan_cost(
        self, principal: Number, annual_rate_percent: Number, term_months: int, processing_fee_percent: Number = ZERO
    ) -> LoanCostEstimate:
        return amortization.estimate_loan_cost(principal, annual_rate_percent, term_months, processing_fee_percent)

    # Penalties and early repayment

    def calculate_penalty(self, overdue_amount: Number, days_overdue: int, rate_per_day_percent: Number) -> Decimal:
        return penalties.calculate_penalty(overdue_amount, days_overdue, rate_per_day_percent)

    def calculate_early_repayment(
        self,
        original_principal: Number,
        principal_already_paid: Number,
        annual_rate_percent: Number,
        disbursement_date: date,
        repayment_date: date,
    ) -> EarlyRepaymentResult:
        result = penalties.calculate_early_repayment(
            original_principal, principal_already_paid, annual_rate_percent, disbursement_date, repayment_date
        )
        logger.info(
            "Early repayment calculated",
            extra={
                "step": "early_repayment",
                "outstanding_principal": str(result.outstanding_principal),
                "accrued_interest": str(result.accrued_interest),
                "total": str(result.total_early_repayment_amount),
            },
        )
        return result

    def calculate_prepayment_impact(
        self,
        outstanding_principal: Number,
        annual_rate_percent: Number,
        remaining_term_months: int,
        prepayment_amount: Number,
    ) -> PrepaymentImpactResult:
        return penalties.calculate_prepayment_impact(
            outstanding_principal, annual_rate_percent, remaining_term_months, prepayment_amount
        )

    # Allocation

    def allocate_payment(
        self, payment_amount: Number, principal_due: Number, interest_due: Number, penalty_due: Number
    ) -> PaymentAllocationResult:
        result = allocation.allocate_payment(payment_amount, principal_due, interest_due, penalty_due)
        logger.info(
            "Payment allocated",
            extra={
                "step": "allocate_payment",
                "payment_amount": str(payment_amount),
                "penalty_paid": str(result.penalty_paid),
                "interest_paid": str(result.interest_paid),
                "principal_paid": str(result.principal_paid),
                "overpayment": str(result.overpayment),
            },
        )
        return result

    # Affordability

    def calculate_deduction_rate_impact(
        self,
        net_income: Number,
        existing_deductions: Number,
        proposed_emi: Number,
        max_rate_percent: Optional[Number] = None,
    ) -> DeductionRateImpact:
        if max_rate_percent is None:
            max_rate_percent = self.settings.max_deduction_rate_percent
        return eligibility.calculate_deduction_rate_impact(net_income, existing_deductions, proposed_emi, max_rate_percent)

    # Member-based checks

    async def calculate_member_loan_capacity(self, member_id: int, loan_type_id: int) -> LoanCapacityResult:
        member = await self.data_source.get_member(member_id)
        if member is None:
            return LoanCapacityResult(member_id=member_id, is_eligible=False, eligibility_notes=MEMBER_NOT_FOUND)

        loan_type = await self.data_source.get_loan_type(loan_type_id)
        if loan_type is None:
            return LoanCapacityResult(member_id=member_id, is_eligible=False, eligibility_notes=LOAN_TYPE_NOT_FOUND)

        return eligibility.calculate_member_loan_capacity(
            member,
            loan_type,
            ceiling_per_multiplier=self.settings.capacity_ceiling_per_multiplier,
            recommended_ratio=self.settings.recommended_capacity_ratio,
            currency=self.settings.currency_symbol,
        )

    async def calculate_member_credit_score(self, member_id: int) -> Decimal:
        """Unknown members score the same as members without loan history"""
        member = await self.data_source.get_member(member_id)
        if member is None:
            return eligibility.BASE_CREDIT_SCORE
        return eligibility.calculate_member_credit_score(member)

    async def analyze_savings_requirement(
        self, member_id: int, requested_amount: Number, loan_type_id: int
    ) -> SavingsAnalysisResult:
        member = await self.data_source.get_member(member_id)
        loan_type = await self.data_source.get_loan_type(loan_type_id) if member is not None else None
        if member is None or loan_type is None:
            return SavingsAnalysisResult(
                member_id=member_id,
                current_savings=member.current_savings if member else ZERO,
                minimum_savings_required=ZERO,
                savings_to_loan_ratio=ZERO,
                minimum_savings_ratio_required=self.settings.min_savings_ratio,
                meets_minimum_savings=False,
                meets_minimum_ratio=False,
                analysis_message=MEMBER_NOT_FOUND if member is None else LOAN_TYPE_NOT_FOUND,
            )

        return eligibility.analyze_savings_requirement(
            member,
            loan_type,
            requested_amount,
            min_savings_ratio=self.settings.min_savings_ratio,
            currency=self.settings.currency_symbol,
        )

    async def analyze_deduction_compliance(
        self, member_id: int, monthly_deduction: Number, monthly_income: Optional[Number] = None
    ) -> DeductionAnalysisResult:
        """
        Affordability of a new monthly deduction given the member's active loans.

        monthly_income defaults to the income on the member's record.
        """
        member = await self.data_source.get_member(member_id)
        if member is None:
            income = to_decimal(monthly_income) if monthly_income is not None else ZERO
            deduction = to_decimal(monthly_deduction)
            return DeductionAnalysisResult(
                requested_monthly_deduction=deduction,
                member_monthly_income=income,
                current_deductions=ZERO,
                total_deductions_after_loan=deduction,
                max_allowed_deduction=ZERO,
                deduction_percentage=ZERO,
                remaining_headroom=ZERO,
                is_compliant=False,
                compliance_status=MEMBER_NOT_FOUND,
                message=MEMBER_NOT_FOUND,
            )

        income = monthly_income if monthly_income is not None else member.monthly_income
        return eligibility.analyze_deduction_compliance(
            member.current_deductions,
            monthly_deduction,
            income,
            self.settings.max_deduction_rate_percent,
        )

    async def check_member_eligibility(
        self,
        member_id: int,
        loan_type_id: int,
        requested_amount: Number,
        as_of: date | None = None,
    ) -> EligibilityCheckResult:
        member = await self.data_source.get_member(member_id)
        loan_type = await self.data_source.get_loan_type(loan_type_id) if member is not None else None

        if member is None or loan_type is None:
            reason = MEMBER_NOT_FOUND if member is None else LOAN_TYPE_NOT_FOUND
            result = EligibilityCheckResult(
                member_id=member_id,
                is_eligible=False,
                credit_score=ZERO,
                risk_rating=RiskRating.CRITICAL,
                passed_criteria=[],
                failed_criteria=[reason],
                requires_committee_review=True,
                message=reason,
            )
        else:
            result = eligibility.check_member_eligibility(
                member,
                loan_type,
                requested_amount,
                as_of=as_of or date.today(),
                min_credit_score=self.settings.min_credit_score,
                max_active_loans=self.settings.max_active_loans,
                committee_review_threshold=self.settings.committee_review_threshold,
                min_savings_ratio=self.settings.min_savings_ratio,
                currency=self.settings.currency_symbol,
            )

        log_eligibility(
            member_id=member_id,
            loan_type_id=loan_type_id,
            eligible=result.is_eligible,
            risk_rating=result.risk_rating.value,
            requires_committee_review=result.requires_committee_review,
        )
        return result
