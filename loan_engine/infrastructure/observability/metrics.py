"""Prometheus metrics for calculation volume, underwriting outcomes and request latency"""

from prometheus_client import Counter, Histogram

# Calculator usage
calculation_counter = Counter(
    "loan_calculations_total",
    "Loan calculations performed",
    ["operation"],  # emi | schedule | penalty | early_repayment | allocation | ...
)

invalid_parameters_counter = Counter(
    "loan_invalid_parameters_total",
    "Calculations rejected for invalid loan parameters",
    ["operation"],
)

# Underwriting
eligibility_counter = Counter(
    "loan_eligibility_decisions_total",
    "Member eligibility decisions",
    ["outcome", "risk_rating"],  # eligible | not_eligible
)

deduction_compliance_counter = Counter(
    "loan_deduction_compliance_total",
    "Deduction-rate compliance checks",
    ["status"],  # Compliant | Exceeds limit | Member not found
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(operation: str) -> None:
    calculation_counter.labels(operation=operation).inc()


def record_eligibility(eligible: bool, risk_rating: str) -> None:
    """Record eligibility metrics for monitoring approval mix by risk band"""
    outcome = "eligible" if eligible else "not_eligible"
    eligibility_counter.labels(outcome=outcome, risk_rating=risk_rating).inc()
