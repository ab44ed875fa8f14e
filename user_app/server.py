"""
Standalone HTTP server for the Users API.

:class:`UserApiServer` owns the two process-wide resources of the service:
the bound WSGI server and the application's connection pool.  It serves
requests from a background thread and stops cooperatively once its
shutdown event is set, which :func:`main` wires to SIGINT and SIGTERM:

1. stop accepting new connections,
2. close the listening socket,
3. dispose the SQLAlchemy engine (closing pooled connections),
4. exit with status 0.

A bootstrap failure while building the application exits with status 1
before any socket is bound.
"""

from __future__ import annotations

import logging
import os
import signal
import threading

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from user_app import create_app, db
from user_app.errors import BootstrapError

logger = logging.getLogger(__name__)

ENDPOINTS = (
    "GET    /api/health",
    "GET    /api/users",
    "GET    /api/users/<id>",
    "POST   /api/users",
)


class UserApiServer:
    """
    Threaded WSGI server bound to a Users API application.

    Attributes:
        app: The Flask application being served.
        shutdown_event: Set to request a graceful stop.
    """

    def __init__(self, app: Flask, host: str | None = None, port: int | None = None) -> None:
        self.app = app
        self.shutdown_event = threading.Event()
        self._server: BaseWSGIServer = make_server(
            host if host is not None else app.config["HOST"],
            port if port is not None else app.config["PORT"],
            app,
            threaded=True,
        )
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        """Port the server is bound to (resolved when 0 was requested)."""
        return self._server.server_port

    def start(self) -> None:
        """Begin serving requests on a background thread."""
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="user-api-server",
            daemon=True,
        )
        self._thread.start()
        logger.info("Server running on port %s", self.port)
        for endpoint in ENDPOINTS:
            logger.info("  %s", endpoint)

    def request_shutdown(self, *_args: object) -> None:
        """Ask the server to stop; usable directly as a signal handler."""
        self.shutdown_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until shutdown is requested; return whether it was."""
        return self.shutdown_event.wait(timeout)

    def close(self) -> None:
        """Stop accepting connections, then release the connection pool."""
        logger.info("Shutting down server...")
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()

        with self.app.app_context():
            db.engine.dispose()
        logger.info("Database connection pool closed")


def main(config_name: str | None = None) -> int:
    """
    Build the application, serve it, and block until interrupted.

    Args:
        config_name: Optional configuration environment name.  Defaults to
            ``FLASK_ENV``, or ``production`` when that is unset.

    Returns:
        Process exit code: ``0`` after a graceful shutdown, ``1`` if the
        database bootstrap failed.
    """
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "production")

    try:
        app = create_app(config_name)
    except BootstrapError as exc:
        logger.error("Database setup failed: %s", exc)
        return 1

    server = UserApiServer(app)
    signal.signal(signal.SIGINT, server.request_shutdown)
    signal.signal(signal.SIGTERM, server.request_shutdown)

    server.start()
    try:
        server.wait()
    finally:
        server.close()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
