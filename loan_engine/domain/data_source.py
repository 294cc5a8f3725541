"""Read-only lookups the calculator needs from the member/loan book"""

from typing import Optional, Protocol

from loan_engine.domain.models import LoanType, MemberProfile


class MemberDataSource(Protocol):
    """Supplies member and loan-type snapshots. Returns None for unknown ids."""

    async def get_member(self, member_id: int) -> Optional[MemberProfile]:
        ...

    async def get_loan_type(self, loan_type_id: int) -> Optional[LoanType]:
        ...
