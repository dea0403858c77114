import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "feketerigo_admin"),
}

# Hosted function platform ({PLATFORM_URL}/functions/v1/<name>)
PLATFORM_URL = os.getenv("PLATFORM_URL", "http://localhost:54321")
PLATFORM_KEY = os.getenv("PLATFORM_KEY", "")
FUNCTIONS_TIMEOUT = float(os.environ["FUNCTIONS_TIMEOUT"]) if os.getenv("FUNCTIONS_TIMEOUT") else None

STORAGE_ROOT = os.getenv("STORAGE_ROOT", "storage")
SIGNED_URL_TTL = int(os.getenv("SIGNED_URL_TTL", "3600"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
