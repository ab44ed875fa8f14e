"""
Smoke-test fixtures for the Users API.

Provides the ``smoke_base_url`` fixture that yields a healthy service URL.
URL resolution is delegated to :func:`shared.live_server.live_server_url`,
which uses ``TEST_BASE_URL`` when set and otherwise serves the test
application on an ephemeral loopback port through the real
:class:`~user_app.server.UserApiServer`.

Key SDET Concepts Demonstrated:
- URL fixtures that work against either a deployed or an in-process server
- Delegating server lifecycle management to a shared helper
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from shared.live_server import live_server_url


@pytest.fixture(scope="function")
def smoke_base_url(app, db_session) -> Generator[str, None, None]:
    """Yield a healthy Users API URL backed by a freshly bootstrapped table."""
    yield from live_server_url(app)

