from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_SMS_FROM_NUMBER, DEFAULT_SMS_PROVIDER, DEFAULT_SMS_TIMEOUT_SECONDS
from ..core.enums import DeliveryStatus


@dataclass(frozen=True)
class DeliveryResult:
    """What a transport reports back for one send."""

    delivered: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Channel:
    """One destination for a scan notification."""

    phone: str
    recipient: str  # "guardian" | "student"


@dataclass(frozen=True)
class ChannelOutcome:
    channel: Channel
    result: DeliveryResult
    logged: bool


@dataclass(frozen=True)
class NotificationLogEntry:
    """Append-only record of one notification attempt (sms_logs row)."""

    id: int
    student_id: int
    phone_number: str
    message: str
    status: DeliveryStatus
    provider: str
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "NotificationLogEntry":
        return cls(
            id=int(row["id"]),
            student_id=int(row["student_id"]),
            phone_number=row["phone_number"],
            message=row["message"],
            status=DeliveryStatus(row["status"]),
            provider=row["provider"],
            message_id=row.get("message_id"),
            error_message=row.get("error_message"),
            sent_at=row.get("sent_at"),
            created_at=row.get("created_at"),
        )


@dataclass(frozen=True)
class SMSSettings:
    provider: str = DEFAULT_SMS_PROVIDER
    enabled: bool = True
    from_number: str = DEFAULT_SMS_FROM_NUMBER
    api_key: str = field(default="", repr=False)
    api_secret: str = field(default="", repr=False)
    timeout_seconds: int = DEFAULT_SMS_TIMEOUT_SECONDS

    def masked(self) -> dict:
        """Safe view for the settings endpoint: secrets are never echoed back."""
        return {
            "provider": self.provider,
            "enabled": self.enabled,
            "fromNumber": self.from_number,
            "apiKey": "***" if self.api_key else "",
            "apiSecret": "***" if self.api_secret else "",
        }
