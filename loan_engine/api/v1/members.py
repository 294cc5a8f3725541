"""GET/POST /v1/members/{member_id}/* - underwriting checks against stored member data"""

import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from loan_engine.api.v1.schemas import (
    CreditScoreResponse,
    DeductionAnalysisRequest,
    DeductionAnalysisResponse,
    EligibilityResponse,
    LoanCapacityResponse,
    SavingsAnalysisResponse,
)
from loan_engine.api.dependencies import get_calculator, get_request_id
from loan_engine.services.calculator import LoanCalculatorService
from loan_engine.domain.eligibility import determine_risk_rating
from loan_engine.infrastructure.observability.metrics import (
    deduction_compliance_counter,
    record_calculation,
    record_eligibility,
)

router = APIRouter(prefix="/members")


def _storage_failure(error: Exception, request: Request) -> HTTPException:
    logging.error(f"Unexpected error: {error}", extra={"request_id": get_request_id(request)})
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("/{member_id}/loan-capacity/{loan_type_id}", response_model=LoanCapacityResponse)
async def get_loan_capacity(
    member_id: int,
    loan_type_id: int,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """
    Maximum and recommended loan amounts from the member's savings.

    Unknown members or loan types come back as not eligible, not 404.
    """
    try:
        result = await calculator.calculate_member_loan_capacity(member_id, loan_type_id)
    except Exception as e:
        raise _storage_failure(e, request)

    record_calculation("loan_capacity")
    return LoanCapacityResponse.model_validate(result)


@router.get("/{member_id}/eligibility", response_model=EligibilityResponse)
async def check_eligibility(
    member_id: int,
    request: Request,
    loan_type_id: int = Query(..., description="Loan product identifier"),
    requested_amount: Decimal = Query(..., gt=0, description="Requested loan amount"),
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """Aggregate eligibility decision with passed/failed criteria and risk rating"""
    try:
        result = await calculator.check_member_eligibility(member_id, loan_type_id, requested_amount)
    except Exception as e:
        raise _storage_failure(e, request)

    record_eligibility(result.is_eligible, result.risk_rating.value)
    return EligibilityResponse.model_validate(result)


@router.get("/{member_id}/credit-score", response_model=CreditScoreResponse)
async def get_credit_score(
    member_id: int,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    try:
        score = await calculator.calculate_member_credit_score(member_id)
    except Exception as e:
        raise _storage_failure(e, request)

    record_calculation("credit_score")
    return CreditScoreResponse(member_id=member_id, credit_score=score, risk_rating=determine_risk_rating(score))


@router.get("/{member_id}/savings-analysis", response_model=SavingsAnalysisResponse)
async def analyze_savings(
    member_id: int,
    request: Request,
    loan_type_id: int = Query(..., description="Loan product identifier"),
    requested_amount: Decimal = Query(..., gt=0, description="Requested loan amount"),
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    try:
        result = await calculator.analyze_savings_requirement(member_id, requested_amount, loan_type_id)
    except Exception as e:
        raise _storage_failure(e, request)

    record_calculation("savings_analysis")
    return SavingsAnalysisResponse.model_validate(result)


@router.post("/{member_id}/deduction-analysis", response_model=DeductionAnalysisResponse)
async def analyze_deduction(
    member_id: int,
    body: DeductionAnalysisRequest,
    request: Request,
    calculator: LoanCalculatorService = Depends(get_calculator),
):
    """Regulatory deduction-rate check including the member's active loan repayments"""
    try:
        result = await calculator.analyze_deduction_compliance(member_id, body.monthly_deduction, body.monthly_income)
    except Exception as e:
        raise _storage_failure(e, request)

    deduction_compliance_counter.labels(status=result.compliance_status).inc()
    return DeductionAnalysisResponse.model_validate(result)
