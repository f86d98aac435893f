import os

from .config import DB_CONFIG, DEFAULT_SCAN_LOCATION, NOTIFY_ASYNC, SMS_CONFIG, env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
