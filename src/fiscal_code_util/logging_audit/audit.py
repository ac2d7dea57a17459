"""Audit trail functionality for the fiscal code utility.

This module provides structured audit logging for batch operations such as
validating a file of fiscal codes or loading a place-code table.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Key fields, logged first and in this order
FIELD_ORDER = (
    "status",
    "input_file",
    "record_count",
    "valid_count",
    "invalid_count",
    "duration",
    "error_message",
    "correlation_id",
)


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.

    Audit events are logged at INFO level, or ERROR level when
    details["status"] is "failure". A timestamp and a correlation ID are
    added when missing.

    Args:
        event_type: Type of operation (e.g., "BATCH_VALIDATED", "PLACE_CODES_LOADED")
        details: Dictionary with event details. Common fields include:
                - input_file: Path to input file (if applicable)
                - record_count: Number of records processed
                - valid_count / invalid_count: Outcome counters
                - status: "success" or "failure"
                - duration: Operation duration in seconds
                - error_message: Error details (if status is failure)

    Example:
        >>> log_audit_event("BATCH_VALIDATED", {
        ...     "input_file": "codes.csv",
        ...     "record_count": 100,
        ...     "valid_count": 97,
        ...     "invalid_count": 3,
        ...     "status": "success",
        ...     "duration": 0.4
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    for field in FIELD_ORDER:
        if field in details:
            value = details[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            else:
                message_parts.append(f"{field}={value}")

    for key, value in details.items():
        if key not in FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)
