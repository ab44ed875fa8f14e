"""WSGI entry point for the Users API."""

import os

from user_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
