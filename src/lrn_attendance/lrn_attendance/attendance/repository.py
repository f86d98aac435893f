from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..database.gateway import Filter, Order, StorageGateway, eq, gte, in_, lt
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def scanned_today(self, lrn: str) -> bool:
        """Server-side check (``has_scanned_today`` function)."""

        raise NotImplementedError

    def exists_in_window(self, student_id: int, start: datetime, end: datetime) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        lrn: str,
        scan_timestamp: datetime,
        scan_location: str,
        status: str,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def list_records(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        student_ids: Optional[Sequence[int]] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records newest first; ``end`` is exclusive."""

        raise NotImplementedError


class GatewayAttendanceRepository(AttendanceRepository):
    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    def scanned_today(self, lrn: str) -> bool:
        return bool(self._gateway.call("has_scanned_today", lrn))

    def exists_in_window(self, student_id: int, start: datetime, end: datetime) -> bool:
        rows = self._gateway.query(
            "attendance",
            [eq("student_id", int(student_id)), gte("scan_timestamp", start), lt("scan_timestamp", end)],
            limit=1,
        )
        return len(rows) > 0

    def create(
        self,
        *,
        student_id: int,
        lrn: str,
        scan_timestamp: datetime,
        scan_location: str,
        status: str,
    ) -> AttendanceRecord:
        row = self._gateway.insert(
            "attendance",
            {
                "student_id": int(student_id),
                "lrn": lrn,
                "scan_timestamp": scan_timestamp,
                "scan_location": scan_location,
                "status": status,
            },
        )
        return AttendanceRecord.from_row(row)

    def list_records(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        student_ids: Optional[Sequence[int]] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        filters: list[Filter] = []
        if start is not None:
            filters.append(gte("scan_timestamp", start))
        if end is not None:
            filters.append(lt("scan_timestamp", end))
        if student_ids is not None:
            filters.append(in_("student_id", list(student_ids)))

        rows = self._gateway.query(
            "attendance",
            filters,
            order=Order("scan_timestamp", descending=True),
            limit=limit,
        )
        return [AttendanceRecord.from_row(r) for r in rows]
