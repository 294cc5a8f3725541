"""SQLAlchemy ORM models for the member and loan-product tables the calculator reads"""

from sqlalchemy import Column, String, Date, DateTime, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Member(Base):
    """Cooperative member with savings and income on record"""

    __tablename__ = "member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_number = Column(String(32), nullable=False, unique=True, index=True)
    full_name = Column(Text, nullable=False)
    account_balance = Column(Numeric(18, 2), nullable=True)
    monthly_income = Column(Numeric(18, 2), nullable=True)
    member_since = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loans = relationship("MemberLoanRecord", back_populates="member", cascade="all, delete-orphan")


class LoanTypeRecord(Base):
    """Loan product and its lending policy"""

    __tablename__ = "loan_type"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    minimum_savings_required = Column(Numeric(18, 2), nullable=False, default=0)
    max_loan_multiplier = Column(Numeric(8, 2), nullable=False, default=0)
    min_loan_term_months = Column(Integer, nullable=False, default=0)
    min_guarantors_required = Column(Integer, nullable=False, default=0)


class MemberLoanRecord(Base):
    """Loan on a member's book; status is ACTIVE, CLOSED or WRITTEN_OFF"""

    __tablename__ = "member_loan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    loan_type_id = Column(Integer, ForeignKey("loan_type.id"), nullable=True)
    status = Column(String(16), nullable=False, default="ACTIVE")
    monthly_payment = Column(Numeric(18, 2), nullable=False, default=0)
    late_repayments = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    member = relationship("Member", back_populates="loans")
