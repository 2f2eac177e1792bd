import logging

from flask import Flask
from storefront.extensions import db, migrate, jwt
from flask_cors import CORS
from config import Config



def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    CORS(app) # Enable CORS for all routes

    # Models must be imported before create_all / migrations
    from storefront import models  # noqa: F401

    # Register Blueprints
    from storefront.api import register_blueprints
    register_blueprints(app)

    from storefront.db_init.cli import register_commands
    register_commands(app)

    return app
