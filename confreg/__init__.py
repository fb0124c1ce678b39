from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager, jwt_required
from flask_marshmallow import Marshmallow
import os

# Extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
ma = Marshmallow()


def create_app(config_name=None):
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app = Flask(__name__)

    from config import config

    app.config.from_object(config[config_name])

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Import models so Flask-Migrate sees every table
    from confreg.models import (
        User,
        EventConfig,
        EventTeam,
        EventRole,
        Registration,
        Registrant,
        Receipt,
        Ticket,
        CancelRequest,
        ExpenseRequest,
        Donation,
        IncomeSource,
        EventLog,
    )

    from confreg.api.auth_bp import auth_bp
    from confreg.api.registrations_bp import registrations_bp
    from confreg.api.payments_bp import payments_bp
    from confreg.api.cancel_requests_bp import cancel_requests_bp
    from confreg.api.check_in_bp import check_in_bp
    from confreg.api.tickets_bp import tickets_bp
    from confreg.api.teams_bp import teams_bp
    from confreg.api.expenses_bp import expenses_bp
    from confreg.api.donations_bp import donations_bp
    from confreg.api.income_sources_bp import income_sources_bp
    from confreg.api.admin_bp import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(registrations_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(cancel_requests_bp)
    app.register_blueprint(check_in_bp)
    app.register_blueprint(tickets_bp)
    app.register_blueprint(teams_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(donations_bp)
    app.register_blueprint(income_sources_bp)
    app.register_blueprint(admin_bp)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"}), 200

    @app.route("/api/auth/check")
    @jwt_required()
    def check_auth():
        return jsonify({"authenticated": True}), 200

    return app
