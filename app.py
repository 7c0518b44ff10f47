import logging

import click
from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from models import db
from models.user import User
from routes import health_bp, auth_bp, admin_bp, booking_bp, dashboard_bp, chat_bp
from security.csrf import csrf_protect
from services.availability import BookingPolicy
from utils.audit import log_event
from utils.auth_context import load_current_user
from utils.request_data import PayloadError
from utils.roles import Role
from utils.seed import seed_courts


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # fail at startup on a bad booking policy
    BookingPolicy.from_config(app.config)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(chat_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Seed default courts at startup (safe & idempotent)
    if app.config.get("SEED_ON_STARTUP"):
        with app.app_context():
            seed_courts()

    @app.before_request
    def _load_user():
        load_current_user()

    app.before_request(csrf_protect)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    @app.errorhandler(PayloadError)
    def _bad_payload(err):
        return jsonify(error=str(err)), 400

    @app.errorhandler(SQLAlchemyError)
    def _storage_failure(err):
        db.session.rollback()
        app.logger.exception("Storage failure: %s", err)
        return jsonify(error="Service temporarily unavailable"), 503

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("set-role")
    @click.argument("email")
    @click.argument("role")
    def set_role(email, role):
        """Give a user the member, coach or admin role (bootstrap)."""
        parsed = Role.parse(role)
        if parsed is None:
            raise click.BadParameter(f"role must be one of {', '.join(r.value for r in Role)}")

        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        user.role = parsed.value
        db.session.commit()
        log_event("CLI_SET_ROLE", user_id=user.id, metadata={"role": parsed.value})

        click.echo(f"{user.email} is now {parsed.value}")

    @app.cli.command("seed-courts")
    def seed_courts_command():
        """Create the default courts if they are missing."""
        added = seed_courts()
        click.echo(f"Added {added} court(s)")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5000)
