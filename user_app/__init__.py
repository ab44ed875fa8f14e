"""
Flask application factory module.

This module creates and configures the Users API Flask application using
the factory pattern, allowing for different configurations
(development, testing, production).

The factory also runs the database bootstrap, so an application object is
only ever returned once the database, the ``users`` table and its
``updated_at`` trigger exist.
"""

import logging
import os
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from config import get_config

# Initialize SQLAlchemy without binding to app
db = SQLAlchemy()

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance.

    Raises:
        BootstrapError: If the database or schema cannot be provisioned.
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    logger.info("Creating app with config: %s", config_class.__name__)

    from user_app.bootstrap import bootstrap_schema, ensure_database

    # The application database must exist before the pool connects to it
    ensure_database(app.config)

    # Initialize extensions
    db.init_app(app)

    # Register blueprints
    from user_app.routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    with app.app_context():
        bootstrap_schema()
        logger.info(
            "Database setup completed for %s on %s:%s",
            app.config["DB_NAME"],
            app.config["DB_HOST"],
            app.config["DB_PORT"],
        )

    return app
