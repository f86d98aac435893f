from __future__ import annotations

from enum import Enum


class DeliveryStatus(str, Enum):
    """Outcome of one notification attempt, stored in sms_logs.status."""

    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


class ScanStatus(str, Enum):
    """Terminal state of a scan request."""

    COMPLETED = "completed"
    BAD_FORMAT = "bad_format"
    NOT_FOUND = "not_found"
    ALREADY_SCANNED = "already_scanned"
    SETUP_INCOMPLETE = "setup_incomplete"
    INTERNAL_ERROR = "internal_error"
