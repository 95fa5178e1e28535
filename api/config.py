"""
Environment-aware configuration.
Values come from the process environment, with .env loaded first if present.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

DEV_ACCESS_SECRET = "dev-access-secret-change-me-0123456789abcdef"
DEV_REFRESH_SECRET = "dev-refresh-secret-change-me-0123456789abcdef"


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _database_url(default: str) -> str:
    """DATABASE_URL wins; otherwise build a Postgres URL from DB_* parts when DB_HOST is set."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    host = os.getenv("DB_HOST")
    if not host:
        return default
    user = quote_plus(os.getenv("DB_USER", "postgres"))
    password = quote_plus(os.getenv("DB_PASSWORD", ""))
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "expense_tracker")
    sslmode = os.getenv("DB_SSLMODE", "disable")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Access and refresh tokens are signed with different secrets
    JWT_SECRET = os.getenv("JWT_SECRET", DEV_ACCESS_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEV_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    # Access tokens cannot be revoked before expiry, keep this short
    JWT_EXPIRE_HOURS = float(os.getenv("JWT_EXPIRE_HOURS", "1"))
    JWT_REFRESH_EXPIRE_HOURS = float(os.getenv("JWT_REFRESH_EXPIRE_HOURS", "168"))

    # argon2 cost; None keeps the argon2-cffi defaults
    PASSWORD_HASH_TIME_COST = None
    PASSWORD_HASH_MEMORY_COST = None
    PASSWORD_HASH_PARALLELISM = None

    DATABASE_URL = _database_url("sqlite:///expense-tracker.db")
    SQL_ECHO = _bool("SQL_ECHO", "false")
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "90"))
    DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))
    SEED_DEFAULT_CATEGORIES = _bool("SEED_DEFAULT_CATEGORIES", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-access-secret-0123456789abcdef0123456789"
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012345678"
    JWT_EXPIRE_HOURS = 1
    JWT_REFRESH_EXPIRE_HOURS = 24
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 8
    PASSWORD_HASH_PARALLELISM = 1
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False
    DATABASE_URL = _database_url("")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def check_production_config(config) -> None:
    """Refuse to start production with the development secrets or no database."""
    if config.get("JWT_SECRET") in (DEV_ACCESS_SECRET, "") or \
            config.get("JWT_REFRESH_SECRET") in (DEV_REFRESH_SECRET, ""):
        raise RuntimeError("JWT_SECRET and JWT_REFRESH_SECRET must be set in production")
    if not config.get("DATABASE_URL"):
        raise RuntimeError("DATABASE_URL (or DB_HOST) must be set in production")
