"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from loan_engine.infrastructure.database.session import get_db
from loan_engine.infrastructure.database.repositories import SqlMemberDataSource
from loan_engine.services.calculator import LoanCalculatorService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_calculator(db: Session = Depends(get_db)) -> LoanCalculatorService:
    """Provide a calculator bound to the request's database session"""
    return LoanCalculatorService(SqlMemberDataSource(db))
