import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "feketerigo_admin"),
}

PLATFORM_URL = os.getenv("PLATFORM_URL", "")
PLATFORM_KEY = os.getenv("PLATFORM_KEY", "")
FUNCTIONS_TIMEOUT = float(os.environ["FUNCTIONS_TIMEOUT"]) if os.getenv("FUNCTIONS_TIMEOUT") else None

STORAGE_ROOT = os.getenv("STORAGE_ROOT", "/var/lib/feketerigo-admin/storage")
SIGNED_URL_TTL = int(os.getenv("SIGNED_URL_TTL", "3600"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
