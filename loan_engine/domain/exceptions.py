"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLoanParametersError(DomainException, ValueError):
    """Numeric loan input is outside the range a calculation can accept"""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(f"Invalid loan parameters: {', '.join(self.errors)}")
