import os

from .config import DB_CONFIG, DEFAULT_SCAN_LOCATION, NOTIFY_ASYNC, SMS_CONFIG, env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")

SMS_CONFIG = {**SMS_CONFIG, "provider": os.getenv("SMS_PROVIDER", "console")}
