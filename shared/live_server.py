"""Shared live-server helpers for the smoke suite."""

from __future__ import annotations

import os
import time
from collections.abc import Generator

import requests
from flask import Flask

from user_app.server import UserApiServer


def is_server_ready(url: str, timeout: int = 2) -> bool:
    """Return True when the health endpoint responds with 200."""
    try:
        response = requests.get(f"{url}/api/health", timeout=timeout)
    except requests.RequestException:
        return False
    return response.status_code == 200


def wait_for_healthy(url: str, timeout: int = 30, interval: float = 0.2) -> None:
    """Poll the health endpoint until ready or timeout."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_server_ready(url):
            return
        time.sleep(interval)
    raise RuntimeError(f"Users API at {url} not healthy after {timeout}s")


def live_server_url(
    app: Flask,
    *,
    base_url_env: str = "TEST_BASE_URL",
) -> Generator[str, None, None]:
    """
    Yield a healthy Users API base URL.

    Priority:
    1. Use explicit base URL from `base_url_env` (and wait for health).
    2. Serve `app` on an ephemeral loopback port, then shut it down on exit.
    """
    provided_base_url = os.getenv(base_url_env)
    if provided_base_url:
        wait_for_healthy(provided_base_url)
        yield provided_base_url.rstrip("/")
        return

    server = UserApiServer(app, host="127.0.0.1", port=0)
    server.start()
    base_url = f"http://127.0.0.1:{server.port}"
    try:
        wait_for_healthy(base_url)
        yield base_url
    finally:
        server.request_shutdown()
        server.close()
