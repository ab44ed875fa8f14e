"""
Database error classification for the Users API.

Both the startup bootstrap and the request handlers need to tell a handful
of storage-engine conditions apart from generic failures.  The raw codes
differ per driver (PostgreSQL SQLSTATE values, SQLite extended result
names), so they are translated here into an :class:`ErrorKind` and the rest
of the code reasons about kinds only.
"""

from __future__ import annotations

from enum import Enum

# PostgreSQL SQLSTATE codes
PG_DUPLICATE_DATABASE = "42P04"
PG_UNIQUE_VIOLATION = "23505"

# SQLite extended result code names (exposed by sqlite3 on Python 3.11+)
SQLITE_UNIQUE_VIOLATIONS = frozenset(
    {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}
)


class ErrorKind(str, Enum):
    """Storage error categories the application reacts to."""

    DUPLICATE_DATABASE = "duplicate_database"
    UNIQUE_VIOLATION = "unique_violation"
    OTHER = "other"


class BootstrapError(RuntimeError):
    """Raised when the database or schema cannot be provisioned at startup."""


def _driver_error(exc: BaseException) -> BaseException:
    """Return the DBAPI exception wrapped by SQLAlchemy, or *exc* itself."""
    orig = getattr(exc, "orig", None)
    return orig if isinstance(orig, BaseException) else exc


def classify_db_error(exc: BaseException) -> ErrorKind:
    """
    Map a database exception onto an :class:`ErrorKind`.

    Accepts either a SQLAlchemy ``DBAPIError`` (the driver exception is read
    from ``.orig``) or a bare driver exception.

    Args:
        exc: The exception raised by the database layer.

    Returns:
        The matching kind, or ``ErrorKind.OTHER`` when the error carries no
        code this application treats specially.
    """
    driver_exc = _driver_error(exc)

    # psycopg2 exposes ``pgcode``; psycopg 3 exposes ``sqlstate``
    sqlstate = getattr(driver_exc, "pgcode", None) or getattr(driver_exc, "sqlstate", None)
    if sqlstate == PG_DUPLICATE_DATABASE:
        return ErrorKind.DUPLICATE_DATABASE
    if sqlstate == PG_UNIQUE_VIOLATION:
        return ErrorKind.UNIQUE_VIOLATION

    if getattr(driver_exc, "sqlite_errorname", None) in SQLITE_UNIQUE_VIOLATIONS:
        return ErrorKind.UNIQUE_VIOLATION

    return ErrorKind.OTHER
