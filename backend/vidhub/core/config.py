"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing. Defaults to a development-safe
        placeholder and should be overridden in production.
    ACCESS_TOKEN_SECRET: str
        HMAC key signing access tokens.
    REFRESH_TOKEN_SECRET: str
        HMAC key signing refresh tokens. Must differ from the access secret.
    ACCESS_TOKEN_EXPIRES_SECONDS: int
        Access token lifetime (short).
    REFRESH_TOKEN_EXPIRES_SECONDS: int
        Refresh token lifetime (long).
    JWT_ALGORITHM: str
        Signing algorithm for both token kinds.
    REFRESH_STORE_BACKEND: str
        ``"database"`` (refresh slot on the ``users`` row) or ``"redis"``.
    REDIS_URL: str | None
        Redis connection string; required by the ``redis`` store backend.
    MEDIA_UPLOAD_URL: str
        Endpoint of the media host receiving avatar/cover uploads.
    MEDIA_UPLOAD_API_KEY: str | None
        Optional bearer key for the media host.
    UPLOAD_TMP_DIR: str
        Directory where incoming files are staged before upload.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    ACCESS_TOKEN_EXPIRES_SECONDS = env_int("ACCESS_TOKEN_EXPIRES_SECONDS", 15 * 60)
    REFRESH_TOKEN_EXPIRES_SECONDS = env_int("REFRESH_TOKEN_EXPIRES_SECONDS", 10 * 24 * 3600)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # flask-jwt-extended only handles cookie transport
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "accessToken"
    JWT_REFRESH_COOKIE_NAME = "refreshToken"
    JWT_COOKIE_SECURE = env_bool("JWT_COOKIE_SECURE", True)
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SAMESITE = os.getenv("JWT_COOKIE_SAMESITE", "Lax")

    # Refresh-token slot
    REFRESH_STORE_BACKEND = os.getenv("REFRESH_STORE_BACKEND", "database")
    REDIS_URL = os.getenv("REDIS_URL")

    # Media host
    MEDIA_UPLOAD_URL = os.getenv("MEDIA_UPLOAD_URL", "http://localhost:9000/upload")
    MEDIA_UPLOAD_API_KEY = os.getenv("MEDIA_UPLOAD_API_KEY")
    MEDIA_UPLOAD_TIMEOUT = float(os.getenv("MEDIA_UPLOAD_TIMEOUT", "10"))
    UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR", os.path.join(tempfile.gettempdir(), "vidhub"))
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and allows cookies over plain HTTP.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    JWT_COOKIE_SECURE = env_bool("JWT_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    REFRESH_STORE_BACKEND = "database"
    MEDIA_UPLOAD_URL = "https://media.test/upload"
    JWT_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
