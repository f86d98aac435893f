from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DeliveryStatus
from ..database.gateway import Filter, Order, StorageGateway, eq, gte, lte
from .model import NotificationLogEntry


class NotificationLogRepository(Protocol):
    def append(
        self,
        *,
        student_id: int,
        phone_number: str,
        message: str,
        status: DeliveryStatus,
        provider: str,
        message_id: Optional[str] = None,
        error_message: Optional[str] = None,
        sent_at: Optional[datetime] = None,
    ) -> NotificationLogEntry:
        raise NotImplementedError

    def list_logs(
        self,
        *,
        student_id: Optional[int] = None,
        status: Optional[DeliveryStatus] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Sequence[NotificationLogEntry]:
        raise NotImplementedError


class GatewayNotificationLogRepository(NotificationLogRepository):
    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    def append(
        self,
        *,
        student_id: int,
        phone_number: str,
        message: str,
        status: DeliveryStatus,
        provider: str,
        message_id: Optional[str] = None,
        error_message: Optional[str] = None,
        sent_at: Optional[datetime] = None,
    ) -> NotificationLogEntry:
        row = self._gateway.insert(
            "sms_logs",
            {
                "student_id": int(student_id),
                "phone_number": phone_number,
                "message": message,
                "status": status.value,
                "provider": provider,
                "message_id": message_id,
                "error_message": error_message,
                "sent_at": sent_at,
            },
        )
        return NotificationLogEntry.from_row(row)

    def list_logs(
        self,
        *,
        student_id: Optional[int] = None,
        status: Optional[DeliveryStatus] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Sequence[NotificationLogEntry]:
        filters: list[Filter] = []
        if student_id is not None:
            filters.append(eq("student_id", int(student_id)))
        if status is not None:
            filters.append(eq("status", status.value))
        if date_from is not None:
            filters.append(gte("created_at", date_from))
        if date_to is not None:
            filters.append(lte("created_at", date_to))

        rows = self._gateway.query("sms_logs", filters, order=Order("created_at", descending=True))
        return [NotificationLogEntry.from_row(r) for r in rows]
