import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Signs bearer tokens; tokens carry no expiry, so rotate this to revoke them.
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret-change-me-0123456789")
JWT_ALGORITHM = "HS256"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

API_PREFIX = os.getenv("API_PREFIX", "/api")
SESSION_TTL_MINUTES = int(os.getenv("SESSION_TTL_MINUTES", "15"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
