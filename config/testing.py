import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_dashboard_test"),
}

DEBUG = False
TESTING = True

ROLLUP_MAX_WORKERS = 1

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_JSON = False
