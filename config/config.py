"""Shared settings read from the environment (every env module starts from these)."""

import os


def env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lrn_attendance"),
}

SMS_CONFIG = {
    "provider": os.getenv("SMS_PROVIDER", "mock"),
    "enabled": env_bool("SMS_ENABLED", "1"),
    "from_number": os.getenv("SMS_FROM_NUMBER", "+1234567890"),
    "api_key": os.getenv("SMS_API_KEY", ""),
    "api_secret": os.getenv("SMS_API_SECRET", ""),
    "timeout_seconds": int(os.getenv("SMS_TIMEOUT_SECONDS", "30")),
}

DEFAULT_SCAN_LOCATION = os.getenv("DEFAULT_SCAN_LOCATION", "School Gate")

# Send SMS on a background worker so the scan response does not wait for it.
NOTIFY_ASYNC = env_bool("NOTIFY_ASYNC", "1")
