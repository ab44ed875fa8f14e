"""
Application configuration module.

This module defines configuration classes for different environments
(development, testing, production). Configuration values are loaded
from environment variables with sensible defaults.
"""

import os
from pathlib import Path

from sqlalchemy.engine import URL, make_url

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to *default*."""
    raw_value = os.environ.get(name, "").strip()
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got '{raw_value}'") from exc


def build_database_uri(
    *,
    host: str,
    port: int,
    database: str,
    user: str,
    password: str,
) -> str:
    """
    Assemble a PostgreSQL SQLAlchemy URI from discrete connection settings.

    Args:
        host: Database server hostname.
        port: Database server port.
        database: Name of the database to connect to.
        user: Role used for the connection.
        password: Password for *user*.

    Returns:
        A ``postgresql+psycopg2://`` URI with the password rendered in clear
        text, suitable for ``SQLALCHEMY_DATABASE_URI``.
    """
    url = URL.create(
        "postgresql+psycopg2",
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


def build_engine_options(
    database_uri: str,
    *,
    pool_max: int,
    idle_timeout: int,
    acquire_timeout: int,
) -> dict:
    """
    Build ``SQLALCHEMY_ENGINE_OPTIONS`` for a bounded connection pool.

    ``connect_timeout`` is a libpq option, so it is only passed when
    *database_uri* points at PostgreSQL.
    """
    options: dict = {
        "pool_size": pool_max,
        "max_overflow": 0,
        "pool_recycle": idle_timeout,
        "pool_timeout": acquire_timeout,
    }
    if make_url(database_uri).get_backend_name() == "postgresql":
        options["connect_args"] = {"connect_timeout": acquire_timeout}
    return options


class Config:
    """Base configuration with default settings."""

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSON_SORT_KEYS: bool = False

    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # HTTP listener
    HOST: str = os.environ.get("HOST", "0.0.0.0")
    PORT: int = _env_int("PORT", 3000)

    # Connection parameters
    DB_HOST: str = os.environ.get("DB_HOST", "localhost")
    DB_PORT: int = _env_int("DB_PORT", 5432)
    DB_NAME: str = os.environ.get("DB_NAME", "test")
    DB_USER: str = os.environ.get("DB_USER", "testuser")
    DB_PASSWORD: str = os.environ.get("DB_PASSWORD", "password")
    DB_ADMIN_NAME: str = os.environ.get("DB_ADMIN_NAME", "postgres")

    # Pool limits (seconds for the timeouts)
    DB_POOL_MAX: int = _env_int("DB_POOL_MAX", 20)
    DB_POOL_IDLE_TIMEOUT: int = _env_int("DB_POOL_IDLE_TIMEOUT", 30)
    DB_POOL_ACQUIRE_TIMEOUT: int = _env_int("DB_POOL_ACQUIRE_TIMEOUT", 2)

    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        build_database_uri(
            host=DB_HOST,
            port=DB_PORT,
            database=DB_NAME,
            user=DB_USER,
            password=DB_PASSWORD,
        ),
    )

    SQLALCHEMY_ENGINE_OPTIONS: dict = build_engine_options(
        SQLALCHEMY_DATABASE_URI,
        pool_max=DB_POOL_MAX,
        idle_timeout=DB_POOL_IDLE_TIMEOUT,
        acquire_timeout=DB_POOL_ACQUIRE_TIMEOUT,
    )


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG: bool = True
    TESTING: bool = True

    # Separate SQLite database; check_same_thread=False because the smoke
    # suite serves requests from worker threads.
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'test_users.db'}?check_same_thread=False"
    )

    SQLALCHEMY_ENGINE_OPTIONS: dict = {
        "pool_pre_ping": True,
    }


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
