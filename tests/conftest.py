"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Dict, Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from loan_engine.api.main import create_app
from loan_engine.infrastructure.database.models import Base, Member, MemberLoanRecord, LoanTypeRecord
from loan_engine.infrastructure.database.session import build_engine, get_db
from loan_engine.domain.models import LoanStatus, LoanType, MemberLoan, MemberProfile
from loan_engine.services.calculator import LoanCalculatorService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class InMemoryDataSource:
    """MemberDataSource over plain dicts"""

    def __init__(self):
        self.members: Dict[int, MemberProfile] = {}
        self.loan_types: Dict[int, LoanType] = {}

    def add_member(self, member: MemberProfile) -> MemberProfile:
        self.members[member.member_id] = member
        return member

    def add_loan_type(self, loan_type: LoanType) -> LoanType:
        self.loan_types[loan_type.loan_type_id] = loan_type
        return loan_type

    async def get_member(self, member_id: int) -> Optional[MemberProfile]:
        return self.members.get(member_id)

    async def get_loan_type(self, loan_type_id: int) -> Optional[LoanType]:
        return self.loan_types.get(loan_type_id)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """
    Members:
    1 - established saver with two cleanly closed loans
    2 - new member, no savings or loan history
    3 - member carrying two active loans, one paid late
    Loan types:
    1 - Normal loan: 3x savings, min savings 50,000, 6-month minimum membership
    """
    db.add(
        LoanTypeRecord(
            id=1,
            name="Normal Loan",
            minimum_savings_required=Decimal("50000"),
            max_loan_multiplier=Decimal("3"),
            min_loan_term_months=6,
            min_guarantors_required=2,
        )
    )
    db.add(
        Member(
            id=1,
            member_number="M-0001",
            full_name="Adaeze Okafor",
            account_balance=Decimal("300000"),
            monthly_income=Decimal("250000"),
            member_since=date(2019, 3, 1),
            loans=[
                MemberLoanRecord(status="CLOSED", monthly_payment=Decimal("20000"), late_repayments=0),
                MemberLoanRecord(status="CLOSED", monthly_payment=Decimal("15000"), late_repayments=0),
            ],
        )
    )
    db.add(
        Member(
            id=2,
            member_number="M-0002",
            full_name="Tunde Bakare",
            account_balance=Decimal("0"),
            monthly_income=Decimal("120000"),
            member_since=None,
        )
    )
    db.add(
        Member(
            id=3,
            member_number="M-0003",
            full_name="Ngozi Eze",
            account_balance=Decimal("150000"),
            monthly_income=Decimal("200000"),
            member_since=date(2021, 6, 15),
            loans=[
                MemberLoanRecord(status="ACTIVE", monthly_payment=Decimal("30000"), late_repayments=0),
                MemberLoanRecord(status="ACTIVE", monthly_payment=Decimal("20000"), late_repayments=2),
            ],
        )
    )
    db.commit()
    return db


@pytest.fixture
def normal_loan() -> LoanType:
    return LoanType(
        loan_type_id=1,
        name="Normal Loan",
        minimum_savings_required=Decimal("50000"),
        max_loan_multiplier=Decimal("3"),
        min_loan_term_months=6,
        min_guarantors_required=2,
    )


@pytest.fixture
def good_member() -> MemberProfile:
    """Two closed loans repaid on time and healthy savings - scores 80"""
    return MemberProfile(
        member_id=1,
        current_savings=Decimal("300000"),
        monthly_income=Decimal("250000"),
        member_since=date(2019, 3, 1),
        loans=[
            MemberLoan(loan_id=10, status=LoanStatus.CLOSED, monthly_payment=Decimal("20000")),
            MemberLoan(loan_id=11, status=LoanStatus.CLOSED, monthly_payment=Decimal("15000")),
        ],
    )


@pytest.fixture
def new_member() -> MemberProfile:
    return MemberProfile(member_id=2, current_savings=Decimal("0"), monthly_income=Decimal("120000"))


@pytest.fixture
def data_source(good_member: MemberProfile, new_member: MemberProfile, normal_loan: LoanType) -> InMemoryDataSource:
    source = InMemoryDataSource()
    source.add_member(good_member)
    source.add_member(new_member)
    source.add_loan_type(normal_loan)
    return source


@pytest.fixture
def calculator(data_source: InMemoryDataSource) -> LoanCalculatorService:
    return LoanCalculatorService(data_source)
