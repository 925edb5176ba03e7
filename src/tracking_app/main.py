from __future__ import annotations

import importlib
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .api.errors import register_error_handlers
from .approvals.controller import register as register_approvals
from .attendance.controller import register as register_attendance
from .health.controller import register as register_health
from .offices.controller import register as register_offices
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .users.controller import register as register_users
from .workplans.controller import register as register_workplans

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def configure_logging(app: Flask, *, level: str = "INFO", log_dir: Optional[str] = None) -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    handlers.append(stream)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        rotating = RotatingFileHandler(os.path.join(log_dir, "app.log"), maxBytes=2_000_000, backupCount=5)
        rotating.setFormatter(formatter)
        handlers.append(rotating)

    for handler in handlers:
        handler.set_name("tracking_app")

    # app.logger is "tracking_app.main", so the package logger covers it too.
    package_logger = logging.getLogger("tracking_app")
    package_logger.setLevel(level.upper())
    # create_app may run more than once per process (tests)
    for old in [h for h in package_logger.handlers if h.get_name() == "tracking_app"]:
        package_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.propagate = False
    app.logger.setLevel(level.upper())


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        app,
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_dir=getattr(settings, "LOG_DIR", None),
    )
    app.logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
            app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=PROJECT_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            app.logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 24)),
            default_office_radius=float(getattr(settings, "DEFAULT_OFFICE_RADIUS_M", 50)),
            api_version=getattr(settings, "API_VERSION", "1.0.0"),
        )
    app.extensions["tracking_container"] = container

    register_error_handlers(app)
    register_health(app, container)
    register_users(app, container)
    register_offices(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_workplans(app, container)
    register_approvals(app, container)
    register_reports(app, container)

    return app
