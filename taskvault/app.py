import os

import click
from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager


def create_app(config=None):
    load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"), override=False)

    app = Flask(__name__)
    app.config.from_object("taskvault.config.Config")
    if config:
        app.config.update(config)

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    JWTManager(app)

    if app.config["JWT_SECRET_KEY"].startswith("change-this"):
        app.logger.warning("JWT_SECRET_KEY is the development default; set it before deploying.")

    from taskvault.errors import register_error_handlers
    from taskvault.services.accounts import AccountDirectory
    from taskvault.utils.db import init_app as init_db

    register_error_handlers(app)
    stores = init_db(app)
    app.extensions["taskvault.accounts"] = AccountDirectory(
        stores.accounts, hash_method=app.config["PASSWORD_HASH_METHOD"]
    )

    # Register blueprints
    from taskvault.routes.auth_routes import auth_bp
    from taskvault.routes.task_routes import tasks_bp

    if app.config["AUTH_ENABLED"]:
        app.register_blueprint(auth_bp, url_prefix="/api")
    else:
        app.logger.warning("AUTH_ENABLED is off; tasks are shared and unauthenticated.")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="TaskVault API"), 200

    @app.cli.command("backfill-timestamps")
    def backfill_timestamps():
        """Stamp createdAt/updatedAt on tasks stored before timestamps existed."""
        count = stores.tasks.backfill_timestamps()
        click.echo(f"Backfilled timestamps on {count} task(s).")

    return app


if __name__ == "__main__":
    # Direct run support: python -m taskvault.app
    create_app().run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
    )
