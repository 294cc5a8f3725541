"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from loan_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_eligibility(
    member_id: int,
    loan_type_id: int,
    eligible: bool,
    risk_rating: str,
    requires_committee_review: bool,
) -> None:
    """Log structured eligibility outcome for underwriting analysis"""
    logging.getLogger("loan_engine.eligibility").info(
        "Eligibility check completed",
        extra={
            "member_id": member_id,
            "loan_type_id": loan_type_id,
            "step": "eligibility_complete",
            "eligibility_outcome": "eligible" if eligible else "not_eligible",
            "risk_rating": risk_rating,
            "requires_committee_review": requires_committee_review,
        },
    )
