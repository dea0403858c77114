import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "feketerigo_admin_test"),
}

PLATFORM_URL = "http://functions.test"
PLATFORM_KEY = "test-key"
FUNCTIONS_TIMEOUT = None

STORAGE_ROOT = os.getenv("STORAGE_ROOT", "storage-test")
SIGNED_URL_TTL = 60

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
