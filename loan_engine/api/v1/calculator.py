"""POST /v1/calculator/* - stateless loan calculations"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from loan_engine.api.v1.schemas import (
    AllocationRequest,
    AllocationResponse,
    DeductionImpactRequest,
    DeductionImpactResponse,
    EarlyRepaymentRequest,
    EarlyRepaymentResponse,
    EmiResponse,
    LoanCostRequest,
    LoanCostResponse,
    LoanSummaryResponse,
    LoanTermsRequest,
    PenaltyRequest,
    PenaltyResponse,
    PrepaymentImpactRequest,
    PrepaymentImpactResponse,
    ScheduleRequest,
    ValidationResponse,
)
from loan_engine.api.dependencies import get_calculator, get_request_id
from loan_engine.services.calculator import LoanCalculatorService
from loan_engine.domain.exceptions import InvalidLoanParametersError
from loan_engine.infrastructure.observability.metrics import invalid_parameters_counter, record_calculation

router = APIRouter(prefix="/calculator")


def _reject(operation: str, error: InvalidLoanParametersError, request: Request) -> HTTPException:
    invalid_parameters_counter.labels(operation=operation).inc()
    logging.warning(
        f"Rejected {operation}: {error}",
        extra={"request_id": get_request_id(request), "step": operation},
    )
    return HTTPException(status_code=422, detail=error.errors)


@router.post("/emi", response_model=EmiResponse)
def calculate_emi(
    body: LoanTermsRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """
    Monthly EMI plus lifetime interest and total repayable.

    Raises 422 for non-positive principal or term, or a negative rate.
    """
    try:
        emi = calculator.calculate_emi(body.principal, body.annual_interest_rate_percent, body.term_months)
        total_interest = calculator.calculate_total_interest(
            body.principal, body.annual_interest_rate_percent, body.term_months
        )
        total_repayable = calculator.calculate_total_repayable(
            body.principal, body.annual_interest_rate_percent, body.term_months
        )
    except InvalidLoanParametersError as e:
        raise _reject("emi", e, request)

    record_calculation("emi")
    return EmiResponse(monthly_emi=emi, total_interest=total_interest, total_repayable=total_repayable)


@router.post("/schedule", response_model=LoanSummaryResponse)
def generate_schedule(
    body: ScheduleRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """
    Full repayment schedule with totals.

    method=reducing_balance (default) amortizes with a flat EMI; flat_rate
    charges interest on the original principal throughout.
    """
    try:
        if body.method == "flat_rate":
            summary = calculator.calculate_flat_rate_summary(
                body.principal, body.annual_interest_rate_percent, body.term_months, body.start_date
            )
        else:
            summary = calculator.calculate_loan_summary(
                body.principal, body.annual_interest_rate_percent, body.term_months, body.start_date
            )
    except InvalidLoanParametersError as e:
        raise _reject("schedule", e, request)

    record_calculation("schedule")
    return LoanSummaryResponse.model_validate(summary)


@router.post("/validate", response_model=ValidationResponse)
def validate_terms(body: LoanTermsRequest, calculator: LoanCalculatorService = Depends(get_calculator)):
    """Check terms against product limits, listing every problem"""
    result = calculator.validate_loan_parameters(body.principal, body.annual_interest_rate_percent, body.term_months)
    return ValidationResponse.model_validate(result)


@router.post("/estimate-loan-cost", response_model=LoanCostResponse)
def estimate_loan_cost(
    body: LoanCostRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    try:
        estimate = calculator.estimate_loan_cost(
            body.principal, body.annual_interest_rate_percent, body.term_months, body.processing_fee_percent
        )
    except InvalidLoanParametersError as e:
        raise _reject("loan_cost", e, request)

    record_calculation("loan_cost")
    return LoanCostResponse.model_validate(estimate)


@router.post("/penalty", response_model=PenaltyResponse)
def calculate_penalty(body: PenaltyRequest, calculator: LoanCalculatorService = Depends(get_calculator)):
    """Late-payment penalty; 0 when nothing is overdue"""
    penalty = calculator.calculate_penalty(body.overdue_amount, body.days_overdue, body.rate_per_day_percent)
    record_calculation("penalty")
    return PenaltyResponse(penalty=penalty)


@router.post("/early-repayment", response_model=EarlyRepaymentResponse)
def calculate_early_repayment(
    body: EarlyRepaymentRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """Settlement amount: outstanding principal plus interest accrued since disbursement"""
    try:
        result = calculator.calculate_early_repayment(
            body.original_principal,
            body.principal_already_paid,
            body.annual_interest_rate_percent,
            body.disbursement_date,
            body.repayment_date,
        )
    except InvalidLoanParametersError as e:
        raise _reject("early_repayment", e, request)

    record_calculation("early_repayment")
    return EarlyRepaymentResponse.model_validate(result)


@router.post("/prepayment-impact", response_model=PrepaymentImpactResponse)
def calculate_prepayment_impact(
    body: PrepaymentImpactRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    try:
        result = calculator.calculate_prepayment_impact(
            body.outstanding_principal,
            body.annual_interest_rate_percent,
            body.remaining_term_months,
            body.prepayment_amount,
        )
    except InvalidLoanParametersError as e:
        raise _reject("prepayment_impact", e, request)

    record_calculation("prepayment_impact")
    return PrepaymentImpactResponse.model_validate(result)


@router.post("/allocate-payment", response_model=AllocationResponse)
def allocate_payment(
    body: AllocationRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """Split a repayment: penalty, then interest, then principal; excess is overpayment"""
    try:
        result = calculator.allocate_payment(
            body.payment_amount, body.principal_due, body.interest_due, body.penalty_due
        )
    except InvalidLoanParametersError as e:
        raise _reject("allocation", e, request)

    record_calculation("allocation")
    return AllocationResponse.model_validate(result)


@router.post("/deduction-impact", response_model=DeductionImpactResponse)
def calculate_deduction_impact(
    body: DeductionImpactRequest,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    impact = calculator.calculate_deduction_rate_impact(
        body.net_income, body.existing_deductions, body.proposed_emi, body.max_rate_percent
    )
    record_calculation("deduction_impact")
    return DeductionImpactResponse.model_validate(impact)
