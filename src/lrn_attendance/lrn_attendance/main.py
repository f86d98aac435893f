from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .students.controller import register as register_students

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            sms_config=getattr(settings, "SMS_CONFIG", None),
            notify_async=bool(getattr(settings, "NOTIFY_ASYNC", True)),
            default_location=getattr(settings, "DEFAULT_SCAN_LOCATION", "School Gate"),
        )

    app.extensions["lrn_attendance"] = container

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "schema_ready": container.readiness.ensure_ready()})

    @app.route("/api/database/init", methods=["POST"], endpoint="database_init")
    def database_init():
        return (
            jsonify(
                {
                    "error": "This endpoint is deprecated. Apply database/schema.sql "
                    "(scripts/init_db.py or AUTO_INIT_DB=1) instead."
                }
            ),
            410,
        )

    register_students(app, container)
    register_attendance(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app
