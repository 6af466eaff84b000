import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "punch_payroll"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "punch_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "")

DEFAULT_DEVICE_ID = os.getenv("DEFAULT_DEVICE_ID", "ZKTeco-K40")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
