from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging import configure_logging
from .container import Container, build_container
from .database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_default_admin,
    list_tables,
    sync_student_qr_codes,
)
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass ``container`` to run against prebuilt services (tests); otherwise the
    MySQL-backed container is built from the active settings module.
    """

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            sync_student_qr_codes(db_config)
            ensure_default_admin(db_config, password=getattr(settings, "DEFAULT_ADMIN_PASSWORD"))

        container = build_container(
            db_config=db_config,
            token_secret=getattr(settings, "TOKEN_SECRET"),
            token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", 24)),
            token_signing=getattr(settings, "TOKEN_SIGNING", "hmac"),
            timezone=getattr(settings, "TIMEZONE", "") or None,
        )

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)

    return app
