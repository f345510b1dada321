"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter

from taxmate_gateway.config import settings


class CustomJsonFormatter(JsonFormatter):
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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_snapshot(
    request_id: str,
    user_id: str,
    business_type: str,
    record_count: int,
    risk_score: int,
    flag_ids: list[str],
    duration_ms: float,
) -> None:
    """Log structured snapshot outcome for analysis"""
    logging.info(
        "Snapshot computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "snapshot_complete",
            "business_type": business_type,
            "record_count": record_count,
            "risk_score": risk_score,
            "risk_flags": flag_ids,
            "duration_ms": duration_ms,
        },
    )


def log_filing(request_id: str, user_id: str, return_type: str, amount: float, period: int) -> None:
    """Log a return draft handed to the filing service"""
    logging.info(
        "Return queued for filing",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "filing_queued",
            "return_type": return_type,
            "amount": amount,
            "period": period,
        },
    )
