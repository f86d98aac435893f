from .config import DB_CONFIG, DEFAULT_SCAN_LOCATION, SMS_CONFIG

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
NOTIFY_ASYNC = False

SMS_CONFIG = {**SMS_CONFIG, "provider": "mock", "enabled": True}
