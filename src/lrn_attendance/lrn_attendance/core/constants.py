"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LRN_PATTERN = r"^[0-9]{12}$"

DEFAULT_SCAN_LOCATION = "School Gate"
DEFAULT_ATTENDANCE_STATUS = "Present"

DEFAULT_SMS_PROVIDER = "mock"
DEFAULT_SMS_FROM_NUMBER = "+1234567890"
DEFAULT_SMS_TIMEOUT_SECONDS = 30

DEFAULT_REPORT_DAYS = 7

ATTENDANCE_SCHEMA_TOKEN = "attendance-schema"
