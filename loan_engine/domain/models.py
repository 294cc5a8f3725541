"""Domain models - pure Python dataclasses representing calculation inputs and results"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class LoanStatus(str, Enum):
    """Lifecycle status of a member's loan as recorded by the loan book"""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    WRITTEN_OFF = "WRITTEN_OFF"


class RiskRating(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class LoanParameters:
    """Terms of a reducing-balance loan"""

    principal: Decimal
    annual_interest_rate_percent: Decimal
    term_months: int
    start_date: date


@dataclass(frozen=True)
class RepaymentScheduleEntry:
    """Single installment in an amortization schedule"""

    installment_index: int
    due_date: date
    opening_balance: Decimal
    emi_amount: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class LoanSummary:
    principal: Decimal
    annual_interest_rate_percent: Decimal
    term_months: int
    monthly_emi: Decimal
    total_interest: Decimal
    total_repayable: Decimal
    schedule: List[RepaymentScheduleEntry]
    first_payment_date: date
    last_payment_date: date


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InstallmentBreakdown:
    """Interest/principal split of one installment against an outstanding balance"""

    interest_amount: Decimal
    principal_amount: Decimal
    total_payment: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class LoanCostEstimate:
    principal: Decimal
    total_interest: Decimal
    processing_fee: Decimal
    total_cost: Decimal
    total_payable: Decimal
    effective_annual_rate_percent: Decimal


@dataclass(frozen=True)
class PaymentAllocationResult:
    """Waterfall split of a single payment"""

    penalty_paid: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    overpayment: Decimal


@dataclass(frozen=True)
class EarlyRepaymentResult:
    """Amount needed to settle a loan before maturity"""

    outstanding_principal: Decimal
    accrued_interest: Decimal
    total_early_repayment_amount: Decimal


@dataclass(frozen=True)
class PrepaymentImpactResult:
    """Effect of a lump-sum prepayment on the remaining term"""

    new_outstanding_balance: Decimal
    interest_saved: Decimal
    loan_fully_paid: bool
    new_monthly_emi: Optional[Decimal]


@dataclass(frozen=True)
class DeductionRateImpact:
    deduction_rate_percentage: Decimal
    is_within_limit: bool
    remaining_headroom: Decimal  # negative when over the limit


@dataclass(frozen=True)
class MemberLoan:
    """A loan already on a member's book, as seen by underwriting"""

    loan_id: int
    status: LoanStatus
    monthly_payment: Decimal = Decimal("0")
    late_repayments: int = 0


@dataclass(frozen=True)
class MemberProfile:
    """Financial snapshot of a cooperative member supplied by the data layer"""

    member_id: int
    current_savings: Decimal
    monthly_income: Decimal = Decimal("0")
    member_since: Optional[date] = None
    loans: List[MemberLoan] = field(default_factory=list)

    def loans_with_status(self, *statuses: LoanStatus) -> List[MemberLoan]:
        return [loan for loan in self.loans if loan.status in statuses]

    @property
    def current_deductions(self) -> Decimal:
        """Sum of monthly repayments on active loans"""
        return sum(
            (loan.monthly_payment for loan in self.loans_with_status(LoanStatus.ACTIVE)),
            Decimal("0"),
        )


@dataclass(frozen=True)
class LoanType:
    """Lending policy attached to a loan product"""

    loan_type_id: int
    name: str
    minimum_savings_required: Decimal
    max_loan_multiplier: Decimal
    min_loan_term_months: int = 0
    min_guarantors_required: int = 0


@dataclass(frozen=True)
class LoanCapacityResult:
    member_id: int
    is_eligible: bool
    eligibility_notes: str
    current_savings: Decimal = Decimal("0")
    max_loan_multiplier: Decimal = Decimal("0")
    max_loan_amount: Decimal = Decimal("0")
    recommended_loan_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class SavingsAnalysisResult:
    member_id: int
    current_savings: Decimal
    minimum_savings_required: Decimal
    savings_to_loan_ratio: Decimal
    minimum_savings_ratio_required: Decimal
    meets_minimum_savings: bool
    meets_minimum_ratio: bool
    analysis_message: str

    @property
    def meets_requirements(self) -> bool:
        return self.meets_minimum_savings and self.meets_minimum_ratio


@dataclass(frozen=True)
class DeductionAnalysisResult:
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


@dataclass(frozen=True)
class EligibilityCheckResult:
    member_id: int
    is_eligible: bool
    credit_score: Decimal
    risk_rating: RiskRating
    passed_criteria: List[str]
    failed_criteria: List[str]
    requires_committee_review: bool
    message: str
