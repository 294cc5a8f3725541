"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from loan_engine.config import settings
from loan_engine.domain.models import RiskRating


class ResultSchema(BaseModel):
    """Base for responses built straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class LoanTermsRequest(BaseModel):
    """Principal, annual rate and term shared by the amortization endpoints"""

    principal: Decimal = Field(..., description="Loan principal")
    annual_interest_rate_percent: Decimal = Field(..., description="Annual interest rate, e.g. 12 for 12%")
    term_months: int = Field(..., description="Loan term in months")


class EmiResponse(BaseModel):
    """Response for POST /v1/calculator/emi"""

    monthly_emi: Decimal
    total_interest: Decimal
    total_repayable: Decimal


class ScheduleRequest(LoanTermsRequest):
    """Request body for POST /v1/calculator/schedule"""

    term_months: int = Field(
        ..., le=settings.max_term_months, description="Loan term in months; one schedule entry per month"
    )
    start_date: date = Field(..., description="Disbursement date; first installment falls one month later")
    method: Literal["reducing_balance", "flat_rate"] = "reducing_balance"


class ScheduleEntrySchema(ResultSchema):
    installment_index: int
    due_date: date
    opening_balance: Decimal
    emi_amount: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_balance: Decimal


class LoanSummaryResponse(ResultSchema):
    principal: Decimal
    annual_interest_rate_percent: Decimal
    term_months: int
    monthly_emi: Decimal
    total_interest: Decimal
    total_repayable: Decimal
    schedule: List[ScheduleEntrySchema]
    first_payment_date: date
    last_payment_date: date


class ValidationResponse(ResultSchema):
    is_valid: bool
    errors: List[str]


class LoanCostRequest(LoanTermsRequest):
    processing_fee_percent: Decimal = Decimal("0")


class LoanCostResponse(ResultSchema):
    principal: Decimal
    total_interest: Decimal
    processing_fee: Decimal
    total_cost: Decimal
    total_payable: Decimal
    effective_annual_rate_percent: Decimal


class PenaltyRequest(BaseModel):
    overdue_amount: Decimal
    days_overdue: int
    rate_per_day_percent: Decimal = Field(..., description="Daily penalty rate, e.g. 0.1 for 0.1% per day")


class PenaltyResponse(BaseModel):
    penalty: Decimal


class EarlyRepaymentRequest(BaseModel):
    original_principal: Decimal
    principal_already_paid: Decimal = Decimal("0")
    annual_interest_rate_percent: Decimal
    disbursement_date: date
    repayment_date: date


class EarlyRepaymentResponse(ResultSchema):
    outstanding_principal: Decimal
    accrued_interest: Decimal
    total_early_repayment_amount: Decimal


class PrepaymentImpactRequest(BaseModel):
    outstanding_principal: Decimal
    annual_interest_rate_percent: Decimal
    remaining_term_months: int
    prepayment_amount: Decimal


class PrepaymentImpactResponse(ResultSchema):
    new_outstanding_balance: Decimal
    interest_saved: Decimal
    loan_fully_paid: bool
    new_monthly_emi: Optional[Decimal] = None


class AllocationRequest(BaseModel):
    """Request body for POST /v1/calculator/allocate-payment"""

    payment_amount: Decimal
    principal_due: Decimal
    interest_due: Decimal
    penalty_due: Decimal = Decimal("0")


class AllocationResponse(ResultSchema):
    penalty_paid: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    overpayment: Decimal


class DeductionImpactRequest(BaseModel):
    net_income: Decimal
    existing_deductions: Decimal = Decimal("0")
    proposed_emi: Decimal
    max_rate_percent: Optional[Decimal] = Field(None, description="Defaults to the configured regulatory cap")


class DeductionImpactResponse(ResultSchema):
    deduction_rate_percentage: Decimal
    is_within_limit: bool
    remaining_headroom: Decimal


class LoanCapacityResponse(ResultSchema):
    member_id: int
    is_eligible: bool
    eligibility_notes: str
    current_savings: Decimal
    max_loan_multiplier: Decimal
    max_loan_amount: Decimal
    recommended_loan_amount: Decimal


class EligibilityResponse(ResultSchema):
    member_id: int
    is_eligible: bool
    credit_score: Decimal
    risk_rating: RiskRating
    passed_criteria: List[str]
    failed_criteria: List[str]
    requires_committee_review: bool
    message: str


class CreditScoreResponse(BaseModel):
    member_id: int
    credit_score: Decimal
    risk_rating: RiskRating


class SavingsAnalysisResponse(ResultSchema):
    member_id: int
    current_savings: Decimal
    minimum_savings_required: Decimal
    savings_to_loan_ratio: Decimal
    minimum_savings_ratio_required: Decimal
    meets_minimum_savings: bool
    meets_minimum_ratio: bool
    analysis_message: str


class DeductionAnalysisRequest(BaseModel):
    """Request body for POST /v1/members/{member_id}/deduction-analysis"""

    monthly_deduction: Decimal = Field(..., ge=0, description="Proposed monthly repayment")
    monthly_income: Optional[Decimal] = Field(None, description="Defaults to the income on the member's record")


class DeductionAnalysisResponse(ResultSchema):
    requested_monthly_deduction: Decimal
    member_monthly_income: Decimal
    current_deductions: Decimal
    total_deductions_after_loan: Decimal
    max_allowed_deduction: Decimal
    deduction_percentage: Decimal
    remaining_headroom: Decimal
    is_compliant: bool
    compliance_status: str
    message: str
