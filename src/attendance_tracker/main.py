from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_utc, to_iso
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .sessions.controller import register as register_sessions
from .users.controller import register as register_users

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"

logger = logging.getLogger("attendance_tracker")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    # Keep the werkzeug request log quiet; errors still surface.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            session_ttl_minutes=int(getattr(settings, "SESSION_TTL_MINUTES", 15)),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    url_prefix = getattr(settings, "API_PREFIX", "/api")

    register_error_handlers(app)
    register_users(app, container, url_prefix=url_prefix)
    register_sessions(app, container, url_prefix=url_prefix)
    register_attendance(app, container, url_prefix=url_prefix)

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "healthy", "timestamp": to_iso(now_utc())})

    return app
