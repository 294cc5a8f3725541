"""Waterfall allocation of a repayment across penalty, interest and principal"""

from loan_engine.domain.exceptions import InvalidLoanParametersError
from loan_engine.domain.models import PaymentAllocationResult
from loan_engine.domain.money import Number, to_decimal


def allocate_payment(
    payment_amount: Number,
    principal_due: Number,
    interest_due: Number,
    penalty_due: Number,
) -> PaymentAllocationResult:
    """
    Apply a payment in strict priority order, each bucket capped at its due:

    1. penalty
    2. interest
    3. principal
    4. whatever remains is reported as overpayment

    No rounding happens here, so the four parts always add back to the payment.

    Example:
        5000 against (principal 100000, interest 1000, penalty 500)
        -> penalty 500, interest 1000, principal 3500, overpayment 0
    """
    payment_amount = to_decimal(payment_amount)
    dues = {
        "Payment amount": payment_amount,
        "Principal due": to_decimal(principal_due),
        "Interest due": to_decimal(interest_due),
        "Penalty due": to_decimal(penalty_due),
    }
    errors = [f"{label} cannot be negative" for label, value in dues.items() if value < 0]
    if errors:
        raise InvalidLoanParametersError(errors)

    remaining = payment_amount

    penalty_paid = min(remaining, dues["Penalty due"])
    remaining -= penalty_paid

    interest_paid = min(remaining, dues["Interest due"])
    remaining -= interest_paid

    principal_paid = min(remaining, dues["Principal due"])
    remaining -= principal_paid

    return PaymentAllocationResult(
        penalty_paid=penalty_paid,
        interest_paid=interest_paid,
        principal_paid=principal_paid,
        overpayment=remaining,
    )
