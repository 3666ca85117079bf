import os
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from guruwali.extensions import db, migrate, login_manager
from guruwali.config import Config
from guruwali.blueprints import register_blueprints
from guruwali.seeds import register_commands


def create_app(config_class=Config, test_config=None):

    app = Flask(__name__)

    app.config.from_object(config_class)

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    register_blueprints(app)
    register_error_handlers(app)
    register_commands(app)

    os.makedirs(
        os.path.join(app.config["UPLOAD_FOLDER"], "photos"),
        exist_ok=True
    )

    with app.app_context():
        # import so every table is registered on the metadata
        from guruwali import models  # noqa: F401
        db.create_all()

    return app


def register_error_handlers(app):

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400:
            return error
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {error}")
        return jsonify({"error": "Internal server error"}), 500
