"""Example: drive the scan use case through the service layer (no Flask).

Controllers stay thin; the business flow lives in the services wired by the container.
"""

import importlib
import sys

from config import get_settings_module

from src.lrn_attendance.lrn_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        sms_config=settings.SMS_CONFIG,
        notify_async=False,
    )

    lrn = sys.argv[1] if len(sys.argv) > 1 else "123456789012"
    outcome = container.scan_service.scan(lrn, "School Gate")
    print(outcome.status.value, "-", outcome.message)

    print(container.report_service.stats().to_dict())


if __name__ == "__main__":
    main()
