import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "punch_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

TIMEZONE = os.getenv("TIMEZONE", "UTC")

DEFAULT_DEVICE_ID = "TEST-DEVICE"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
