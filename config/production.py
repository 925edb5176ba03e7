import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "tracking_db"),
}

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

DEFAULT_OFFICE_RADIUS_M = float(os.getenv("DEFAULT_OFFICE_RADIUS_M", "50"))
API_VERSION = "1.0.0"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
