from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .attendance.duplicate_check import DuplicateScanCheck
from .attendance.recorder import AttendanceRecorder
from .attendance.repository import GatewayAttendanceRepository
from .attendance.service import ScanService
from .core.constants import DEFAULT_SCAN_LOCATION
from .database.connection import DBConfig, DatabaseConnection
from .database.gateway import StorageGateway
from .database.mysql_gateway import MySQLStorageGateway
from .database.readiness import SchemaReadiness, attendance_table_probe
from .notifications.dispatcher import NotificationDispatcher
from .notifications.factory import TransportFactory
from .notifications.model import SMSSettings
from .notifications.repository import GatewayNotificationLogRepository
from .notifications.settings import NotificationSettings
from .reports.service import ReportService
from .students.repository import GatewayStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    gateway: StorageGateway

    students_repo: GatewayStudentRepository
    attendance_repo: GatewayAttendanceRepository
    notification_logs_repo: GatewayNotificationLogRepository

    readiness: SchemaReadiness
    notification_settings: NotificationSettings

    student_service: StudentService
    dispatcher: NotificationDispatcher
    scan_service: ScanService
    report_service: ReportService


def mysql_gateway(db_config: dict) -> MySQLStorageGateway:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    return MySQLStorageGateway(DatabaseConnection.get_instance(config))


def sms_settings(sms_config: Optional[dict]) -> SMSSettings:
    sms_config = sms_config or {}
    defaults = SMSSettings()
    return SMSSettings(
        provider=str(sms_config.get("provider") or defaults.provider).strip().lower(),
        enabled=bool(sms_config.get("enabled", defaults.enabled)),
        from_number=str(sms_config.get("from_number") or defaults.from_number),
        api_key=str(sms_config.get("api_key") or ""),
        api_secret=str(sms_config.get("api_secret") or ""),
        timeout_seconds=int(sms_config.get("timeout_seconds") or defaults.timeout_seconds),
    )


def build_container(
    *,
    db_config: Optional[dict] = None,
    gateway: Optional[StorageGateway] = None,
    sms_config: Optional[dict] = None,
    transport_factory: Optional[TransportFactory] = None,
    notify_async: bool = True,
    default_location: str = DEFAULT_SCAN_LOCATION,
    clock=None,
) -> Container:
    if gateway is None:
        if db_config is None:
            raise ValueError("build_container needs db_config or gateway")
        gateway = mysql_gateway(db_config)

    students_repo = GatewayStudentRepository(gateway)
    attendance_repo = GatewayAttendanceRepository(gateway)
    notification_logs_repo = GatewayNotificationLogRepository(gateway)

    readiness = SchemaReadiness(attendance_table_probe(gateway))
    notification_settings = NotificationSettings(sms_settings(sms_config), transport_factory)

    executor: Optional[Executor] = None
    if notify_async:
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="sms-notify")

    student_service = StudentService(students_repo)
    dispatcher = NotificationDispatcher(notification_settings, notification_logs_repo, clock=clock)
    scan_service = ScanService(
        students_repo,
        DuplicateScanCheck(attendance_repo, students_repo, clock=clock),
        AttendanceRecorder(attendance_repo, students_repo, clock=clock, default_location=default_location),
        dispatcher,
        executor=executor,
    )
    report_service = ReportService(
        attendance_repo,
        students_repo,
        today=(lambda: clock().date()) if clock else None,
    )

    return Container(
        gateway=gateway,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        notification_logs_repo=notification_logs_repo,
        readiness=readiness,
        notification_settings=notification_settings,
        student_service=student_service,
        dispatcher=dispatcher,
        scan_service=scan_service,
        report_service=report_service,
    )
