"""
Shared pytest fixtures for the Users API test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing a freshly bootstrapped table for each test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Fixture dependencies
- Test data factories
- Database setup/teardown through the real schema bootstrap
- Test client creation
"""

import os
import pytest
from typing import Any
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from user_app import create_app, db
from user_app.bootstrap import bootstrap_schema
from user_app.models import User


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused
    for all tests; the SQLite database behind it is reset per test
    by ``db_session``.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing")
    yield application
    with application.app_context():
        db.engine.dispose()


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for making HTTP requests.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a freshly bootstrapped database for each test.

    Drops whatever a previous run left behind, runs the same
    ``bootstrap_schema`` the server runs at startup (table plus
    ``updated_at`` trigger), then drops everything afterwards.

    Args:
        app: Flask application fixture.

    Yields:
        The Flask-SQLAlchemy extension.
    """
    with app.app_context():
        db.drop_all()
        bootstrap_schema()
        yield db
        db.session.rollback()
        db.drop_all()


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def user_factory(db_session):
    """
    Factory fixture for creating User rows.

    Args:
        db_session: Database session fixture.

    Returns:
        Function that creates and returns User instances.

    Example:
        def test_something(user_factory):
            user = user_factory(name="Ada")
            assert user.id is not None
    """

    def _create_user(name: str | None = None, email: str | None = None) -> User:
        user = User(
            name=name or fake.name(),
            email=email or fake.unique.email(),
        )
        db_session.session.add(user)
        db_session.session.commit()
        return user

    return _create_user


@pytest.fixture
def sample_user(user_factory) -> User:
    """Create a single user for tests that just need one row."""
    return user_factory(name="Sample User", email="sample@example.com")


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def valid_user_data() -> dict[str, Any]:
    """
    Provide valid user data for POST requests.

    Returns:
        Dictionary with a random name and an unused email.
    """
    return {
        "name": fake.name(),
        "email": fake.unique.email(),
    }


@pytest.fixture
def api_headers() -> dict[str, str]:
    """
    Provide common headers for API requests.

    Returns:
        Dictionary of HTTP headers.
    """
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
