import logging

from flask import Flask, jsonify, request
from dotenv import load_dotenv
from sqlalchemy import inspect as sa_inspect
from werkzeug.exceptions import HTTPException

from app.crm.config import load_config
from app.crm.db import init_db, teardown_db_session
from app.crm.models import Base
from app.crm.routes import bp as routes_bp
from app.crm.modules.customers.api import bp as customers_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    app.register_blueprint(routes_bp)
    app.register_blueprint(customers_bp, url_prefix="/Customer")

    app.teardown_appcontext(teardown_db_session)

    # Schema health (lean): log tables the code expects but the DB lacks.
    def _run_schema_health_check() -> None:
        try:
            insp = sa_inspect(app.extensions["sqlalchemy_engine"])
            missing = [name for name in Base.metadata.tables if not insp.has_table(name)]
        except Exception as e:
            app.logger.exception("Schema health check failed: %s", e)
            return
        if missing:
            app.logger.error("DB schema out of date; run `alembic upgrade head`. Missing: %s", ", ".join(missing))

    _run_schema_health_check()

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):  # type: ignore[no-redef]
        # Routing redirects (e.g. trailing slash) are HTTPExceptions too.
        if e.code is None or e.code < 400:
            return e
        if e.code == 500:
            app.logger.error("500 on %s %s: %s", request.method, request.path, e.description)
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def _err_500(e):  # type: ignore[no-redef]
        # Ensure stack trace shows in the logs.
        app.logger.exception("Unhandled 500 on %s %s", request.method, request.path)
        return jsonify({"error": "Internal Server Error", "message": "Unexpected error."}), 500

    @app.before_request
    def _log_request():
        app.logger.debug("%s %s", request.method, request.path)

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
