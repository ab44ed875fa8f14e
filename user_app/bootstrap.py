"""
Idempotent database bootstrap for the Users API.

Runs once per process before the server accepts connections:

1. :func:`ensure_database` creates the application database through the
   server's administrative database, tolerating "already exists".
2. :func:`bootstrap_schema` creates the ``users`` table when absent and
   installs (or replaces) the trigger that re-stamps ``updated_at`` on every
   row update.

Every failure other than "database already exists" is raised as
:class:`~user_app.errors.BootstrapError`; serving requests without a valid
schema is never attempted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from user_app import db
from user_app.errors import BootstrapError, ErrorKind, classify_db_error
from user_app.models import User  # noqa: F401  (registers the users table)

logger = logging.getLogger(__name__)

UPDATED_AT_TRIGGER = "update_users_updated_at"

# Trigger DDL per dialect.  Statements run in order inside one transaction.
UPDATED_AT_TRIGGER_DDL: dict[str, tuple[str, ...]] = {
    "postgresql": (
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """,
        f"DROP TRIGGER IF EXISTS {UPDATED_AT_TRIGGER} ON users",
        f"""
        CREATE TRIGGER {UPDATED_AT_TRIGGER}
            BEFORE UPDATE ON users
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column()
        """,
    ),
    # SQLite cannot assign NEW in a BEFORE trigger; an AFTER trigger issues
    # its own UPDATE instead (recursive triggers are off by default).
    "sqlite": (
        f"DROP TRIGGER IF EXISTS {UPDATED_AT_TRIGGER}",
        f"""
        CREATE TRIGGER {UPDATED_AT_TRIGGER}
            AFTER UPDATE ON users
            FOR EACH ROW
        BEGIN
            UPDATE users SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
        END
        """,
    ),
}


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix):].split("?", 1)[0]
    if sqlite_path in ("", ":memory:"):
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def ensure_database(
    config: Mapping[str, Any],
    engine_factory: Callable[..., Engine] = create_engine,
) -> None:
    """
    Create the application database if it does not exist yet.

    Only PostgreSQL URIs are provisioned; for SQLite the database file is
    created on first connect, so only its parent directory is ensured.

    Args:
        config: Flask config mapping holding ``SQLALCHEMY_DATABASE_URI`` and
            optionally ``DB_ADMIN_NAME`` / ``DB_POOL_ACQUIRE_TIMEOUT``.
        engine_factory: Callable used to build the administrative engine.

    Raises:
        BootstrapError: If the administrative connection fails or the
            database cannot be created for any reason other than already
            existing.
    """
    database_uri = str(config["SQLALCHEMY_DATABASE_URI"])
    url = make_url(database_uri)

    if url.get_backend_name() != "postgresql":
        _ensure_sqlite_db_parent_exists(database_uri)
        logger.debug("Skipping database creation for backend %s", url.get_backend_name())
        return

    database_name = url.database
    if not database_name:
        raise BootstrapError("Database URI does not name a database")

    admin_engine = engine_factory(
        url.set(database=config.get("DB_ADMIN_NAME", "postgres")),
        isolation_level="AUTOCOMMIT",
        poolclass=NullPool,
        connect_args={"connect_timeout": config.get("DB_POOL_ACQUIRE_TIMEOUT", 2)},
    )
    try:
        # Identifiers cannot be bound as parameters; quote through the dialect.
        quoted_name = admin_engine.dialect.identifier_preparer.quote_identifier(database_name)
        try:
            with admin_engine.connect() as connection:
                connection.execute(text(f"CREATE DATABASE {quoted_name}"))
        except SQLAlchemyError as exc:
            if classify_db_error(exc) is not ErrorKind.DUPLICATE_DATABASE:
                raise BootstrapError(
                    f"Unable to create database '{database_name}': {exc}"
                ) from exc
            logger.info("Database %s already exists", database_name)
        else:
            logger.info("Created database %s", database_name)
    finally:
        admin_engine.dispose()


def bootstrap_schema() -> None:
    """
    Create the ``users`` table and install the ``updated_at`` trigger.

    Must run inside an application context.  Safe to call repeatedly: the
    table is only created when absent and the trigger is dropped and
    recreated.

    Raises:
        BootstrapError: If any DDL statement fails.
    """
    try:
        db.create_all()

        dialect_name = db.engine.dialect.name
        statements = UPDATED_AT_TRIGGER_DDL.get(dialect_name)
        if statements is None:
            logger.warning("No updated_at trigger available for dialect %s", dialect_name)
            return

        with db.engine.begin() as connection:
            for statement in statements:
                connection.execute(text(statement))
    except SQLAlchemyError as exc:
        raise BootstrapError(f"Schema bootstrap failed: {exc}") from exc

    logger.info("Users table and %s trigger ready", UPDATED_AT_TRIGGER)
