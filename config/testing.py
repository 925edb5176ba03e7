import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = 1

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "tracking_test_db"),
}

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_DIR = None

DEFAULT_OFFICE_RADIUS_M = 50.0
API_VERSION = "1.0.0"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
