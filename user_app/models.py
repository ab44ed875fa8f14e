"""
Database models for the Users API.

This module defines the SQLAlchemy model backing the ``users`` table.
Timestamps are stamped by the database: ``created_at`` and ``updated_at``
default to ``now()`` on insert, and a trigger installed by
:mod:`user_app.bootstrap` refreshes ``updated_at`` on every update.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func

from user_app import db

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255


class User(db.Model):
    """
    User model, the only entity persisted by the service.

    Attributes:
        id: Unique, database-generated identifier.
        name: Display name.
        email: Email address, unique across all users.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp of the last modification of the row.
    """

    __tablename__ = "users"

    id: int = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name: str = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    email: str = db.Column(db.String(EMAIL_MAX_LENGTH), nullable=False, unique=True)
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )

    @staticmethod
    def _to_utc_iso(value: datetime | None) -> str | None:
        """
        Convert datetime to an ISO-8601 UTC string.

        SQLite returns naive values for ``CURRENT_TIMESTAMP`` columns, which
        it always produces in UTC.
        """
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.isoformat()

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the user to a dictionary representation.

        Returns:
            Dictionary containing all user fields.
        """
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self._to_utc_iso(self.created_at),
            "updated_at": self._to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        """Return string representation of the user."""
        return f"<User {self.id}: {self.email}>"
