import logging

from flask import Flask, jsonify

from admin.setup import init_admin
from blueprint import blue_print
from configs import Config, db, login
from dao import admin as admin_dao
from utils.auth import read_token
from utils.cache import TTLCache
from utils.clock import utcnow
from utils.errors import register_error_handlers


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    app.logger.setLevel(level)


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    _configure_logging(app)
    db.init_app(app)
    login.init_app(app)
    app.extensions["response_cache"] = TTLCache(app.config["CACHE_TTL_SECONDS"])
    # wall clock for bill timestamps, duplicate window and reports
    app.extensions["clock"] = app.config.get("CLOCK") or utcnow

    @login.user_loader
    def load_user(admin_id):
        return admin_dao.get_admin(admin_id)

    @login.request_loader
    def load_user_from_token(req):
        header = req.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        payload = read_token(header[len("Bearer "):].strip())
        if not payload:
            return None
        admin = admin_dao.get_admin(payload["admin_id"])
        if admin is None or not admin.is_active:
            return None
        return admin

    @login.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    register_error_handlers(app)
    init_admin(app)  # back-office at /manage
    blue_print(app)

    app.logger.info("app ready, database %s", app.config["SQLALCHEMY_DATABASE_URI"].split("@")[-1])
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
