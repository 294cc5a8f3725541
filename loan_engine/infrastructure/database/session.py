"""Database engine and session factory for the member/loan book"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from loan_engine.config import settings


def build_engine(database_url: str) -> Engine:
    """Pooled engine for server databases; SQLite is shared across threads instead"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=3600,  # seconds
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; the calculator only reads"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
