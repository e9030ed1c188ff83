from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from hsportal.cache import BackgroundWriter, build_cache_store
from hsportal.config import load_config
from hsportal.dashboard import ACHIEVEMENT_RATES, AggregateReadCache, dashboard_bp
from hsportal.models import Database
from hsportal.reports import achievement_rates_report


def run_migrations(database_url: str) -> None:
    """Upgrade the database to the latest Alembic revision."""
    if database_url.startswith("sqlite"):
        return
    from alembic import command
    from alembic.config import Config

    repo_root = Path(__file__).resolve().parent.parent
    cfg = Config(str(repo_root / "alembic.ini"))
    cfg.set_main_option("script_location", str(repo_root / "alembic"))
    cfg.attributes["database_url"] = database_url
    command.upgrade(cfg, "head")


def create_app(
    config: Optional[Dict[str, Any]] = None,
    database: Optional[Database] = None,
    cache_store=None,
    writer: Optional[BackgroundWriter] = None,
) -> Flask:
    """Build the portal application.

    Clients that are not passed in are created from ``config`` and released
    again by :func:`shutdown`.
    """
    config = load_config(config)

    app = Flask(__name__)
    app.secret_key = config["SECRET_KEY"]
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=config["SESSION_COOKIE_SECURE"],
        DASHBOARD_CACHE_TTL=config["DASHBOARD_CACHE_TTL"],
    )

    if database is None:
        if config["RUN_MIGRATIONS"]:
            run_migrations(config["DATABASE_URL"])
        database = Database(config["DATABASE_URL"])
    if cache_store is None:
        cache_store = build_cache_store(config)
    if writer is None:
        writer = BackgroundWriter(max_workers=config["CACHE_WRITE_WORKERS"])

    app.extensions["portal"] = {
        "database": database,
        "cache_store": cache_store,
        "writer": writer,
        "achievement_rates": AggregateReadCache(
            cache_store,
            partial(achievement_rates_report, database),
            ACHIEVEMENT_RATES,
            ttl=config["DASHBOARD_CACHE_TTL"],
            dispatch=writer.submit,
        ),
    }

    app.register_blueprint(dashboard_bp)

    @app.after_request
    def set_security_headers(response):
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify(error="Not found"), 404

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    return app


def shutdown(app: Flask) -> None:
    """Release the clients held by ``app``."""
    portal = app.extensions.get("portal")
    if not portal:
        return
    portal["writer"].shutdown(wait=True)
    try:
        portal["cache_store"].close()
    except Exception:
        app.logger.warning("Closing the cache client failed", exc_info=True)
    portal["database"].dispose()
