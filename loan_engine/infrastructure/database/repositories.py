"""Data access layer for member and loan-type snapshots"""

from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from loan_engine.infrastructure.database.models import Member, LoanTypeRecord
from loan_engine.domain.models import LoanStatus, LoanType, MemberLoan, MemberProfile


TRACKED_STATUSES = {status.value for status in LoanStatus}


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class MemberRepository:
    """Repository for members and their loan book"""

    def __init__(self, db: Session):
        self.db = db

    def get_member_profile(self, member_id: int) -> Optional[MemberProfile]:
        """Load member with loans as a calculation snapshot"""
        member = (
            self.db.query(Member)
            .filter(Member.id == member_id)
            .first()
        )
        if member is None:
            return None

        return MemberProfile(
            member_id=member.id,
            current_savings=_decimal(member.account_balance),
            monthly_income=_decimal(member.monthly_income),
            member_since=member.member_since,
            loans=[
                MemberLoan(
                    loan_id=loan.id,
                    status=LoanStatus(loan.status),
                    monthly_payment=_decimal(loan.monthly_payment),
                    late_repayments=loan.late_repayments or 0,
                )
                for loan in member.loans
                # Pending, approved and other pre-disbursement loans are not part of the book
                if loan.status in TRACKED_STATUSES
            ],
        )


class LoanTypeRepository:
    """Repository for loan products"""

    def __init__(self, db: Session):
        self.db = db

    def get_loan_type(self, loan_type_id: int) -> Optional[LoanType]:
        record = (
            self.db.query(LoanTypeRecord)
            .filter(LoanTypeRecord.id == loan_type_id)
            .first()
        )
        if record is None:
            return None

        return LoanType(
            loan_type_id=record.id,
            name=record.name,
            minimum_savings_required=_decimal(record.minimum_savings_required),
            max_loan_multiplier=_decimal(record.max_loan_multiplier),
            min_loan_term_months=record.min_loan_term_months or 0,
            min_guarantors_required=record.min_guarantors_required or 0,
        )


class SqlMemberDataSource:
    """MemberDataSource backed by the application database session.

    Queries run in the threadpool so a slow lookup never stalls the event loop.
    """

    def __init__(self, db: Session):
        self.members = MemberRepository(db)
        self.loan_types = LoanTypeRepository(db)

    async def get_member(self, member_id: int) -> Optional[MemberProfile]:
        return await run_in_threadpool(self.members.get_member_profile, member_id)

    async def get_loan_type(self, loan_type_id: int) -> Optional[LoanType]:
        return await run_in_threadpool(self.loan_types.get_loan_type, loan_type_id)
