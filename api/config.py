"""
Environment-aware configuration.
Values come from the process environment, with .env read first if present.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _seconds(name: str, default: int) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, str(default))))


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///contact-form.db")
    SQL_ECHO = _flag("SQL_ECHO", "false")

    # Access and refresh tokens are signed with distinct secrets
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-access-secret-change-me-0123456789")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "dev-refresh-secret-change-me-0123456789")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "contact-form-api")
    ACCESS_TOKEN_EXPIRES = _seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 15 * 60)
    REFRESH_TOKEN_EXPIRES = _seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 7 * 24 * 3600)

    # Flask-Limiter; per-route limits are read when the route is hit
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per 15 minutes")
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "5 per 15 minutes")
    REGISTER_RATE_LIMIT = os.getenv("REGISTER_RATE_LIMIT", "3 per hour")
    REFRESH_RATE_LIMIT = os.getenv("REFRESH_RATE_LIMIT", "10 per 15 minutes")
    PASSWORD_RATE_LIMIT = os.getenv("PASSWORD_RATE_LIMIT", "3 per hour")

    SEED_DEFAULT_PASSWORD = os.getenv("SEED_DEFAULT_PASSWORD", "Password123")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///contact-form-test.db")
    RATELIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False
    # No fallbacks: signing fails loudly when these are not provided
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")


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
