"""
REST API endpoints for User management.

All endpoints return JSON responses. Storage errors are caught at the
endpoint boundary and mapped to status codes; none of them reach the
server loop.

Endpoints:
    GET    /api/health        - Health check
    GET    /api/users          - List the 100 most recently created users
    GET    /api/users/<id>     - Get a single user by ID
    POST   /api/users          - Create a new user
"""

import logging
from datetime import datetime, timezone
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from user_app import db
from user_app.errors import ErrorKind, classify_db_error
from user_app.models import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, User

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

USER_LIST_LIMIT = 100

FIELD_MAX_LENGTHS = {
    "name": NAME_MAX_LENGTH,
    "email": EMAIL_MAX_LENGTH,
}


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def _json_error(message: str, status_code: int) -> tuple[Response, int]:
    """Build a ``{"error": ...}`` response with the given status code."""
    return jsonify({"error": message}), status_code


def validate_user_data(data: dict[str, Any]) -> str | None:
    """
    Validate user data from a create request.

    Args:
        data: Parsed JSON request body.

    Returns:
        An error message describing the first problem found, or ``None``
        if the data is valid.
    """
    missing = [
        field for field in ("name", "email")
        if not isinstance(data.get(field), str) or not data[field].strip()
    ]
    if missing:
        return "Name and email are required"

    for field, max_length in FIELD_MAX_LENGTHS.items():
        if len(data[field].strip()) > max_length:
            return f"'{field}' must be {max_length} characters or less"

    return None


# -----------------------------------------------------------------------------
# API Endpoints
# -----------------------------------------------------------------------------

@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    return jsonify({
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": current_app.config["DB_NAME"],
        "host": current_app.config["DB_HOST"],
    }), 200


@api_bp.route("/users", methods=["GET"])
def get_users() -> tuple[Response, int]:
    """
    List the most recently created users.

    Returns:
        JSON response with up to ``USER_LIST_LIMIT`` users, newest first,
        and their count.
    """
    stmt = (
        select(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(USER_LIST_LIMIT)
    )

    try:
        users = db.session.scalars(stmt).all()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error fetching users")
        return _json_error("Failed to fetch users", 500)

    return jsonify({
        "users": [user.to_dict() for user in users],
        "count": len(users)
    }), 200


@api_bp.route("/users/<int:user_id>", methods=["GET"])
def get_user(user_id: int) -> tuple[Response, int]:
    """
    Get a single user by ID.

    Args:
        user_id: The unique identifier of the user.

    Returns:
        JSON response with user data and 200 status code,
        or error message and 404 if not found.
    """
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error fetching user %s", user_id)
        return _json_error("Failed to fetch user", 500)

    if user is None:
        logger.warning("User %s not found", user_id)
        return _json_error("User not found", 404)

    return jsonify(user.to_dict()), 200


@api_bp.route("/users", methods=["POST"])
def create_user() -> tuple[Response, int]:
    """
    Create a new user.

    Request Body (JSON):
        name: Display name (required)
        email: Email address (required, unique)

    Returns:
        JSON response with the created user and 201 status code,
        400 if validation fails, or 409 if the email is already taken.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _json_error("Request body must be JSON", 400)

    error = validate_user_data(data)
    if error:
        logger.warning("Validation failed: %s", error)
        return _json_error(error, 400)

    user = User(name=data["name"].strip(), email=data["email"].strip())

    try:
        db.session.add(user)
        db.session.commit()
        payload = user.to_dict()
    except SQLAlchemyError as exc:
        db.session.rollback()
        if classify_db_error(exc) is ErrorKind.UNIQUE_VIOLATION:
            logger.warning("Email already exists: %s", user.email)
            return _json_error("Email already exists", 409)
        logger.exception("Error creating user")
        return _json_error("Failed to create user", 500)

    logger.info("Created user with ID: %s", payload["id"])
    return jsonify(payload), 201


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

# Routing errors (unknown paths, bad ids, wrong verbs) are raised before any
# blueprint is matched, so 400/404/405 are registered application-wide.

@api_bp.app_errorhandler(400)
def bad_request(error: Exception) -> tuple[Response, int]:
    """Handle 400 Bad Request errors."""
    return _json_error("Bad request", 400)


@api_bp.app_errorhandler(404)
def not_found(error: Exception) -> tuple[Response, int]:
    """Handle 404 Not Found errors."""
    return _json_error("Resource not found", 404)


@api_bp.app_errorhandler(405)
def method_not_allowed(error: Exception) -> tuple[Response, int]:
    """Handle 405 Method Not Allowed errors."""
    return _json_error("Method not allowed", 405)


@api_bp.errorhandler(500)
def internal_error(error: Exception) -> tuple[Response, int]:
    """Handle 500 Internal Server errors."""
    logger.error("Internal server error: %s", error)
    return _json_error("Internal server error", 500)
