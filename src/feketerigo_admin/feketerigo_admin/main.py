from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_profiles, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .backups.controller import register as register_backups
from .dashboard.controller import register as register_dashboard
from .invoices.controller import register as register_invoices
from .newsletters.controller import register as register_newsletters
from .payroll.controller import register as register_payroll
from .platform.controller import register as register_files
from .profiles.controller import register as register_profiles
from .teams.controller import register as register_teams

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("feketerigo_admin")


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    database_dir = Path(__file__).resolve().parents[3] / "database"
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=database_dir / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
        ensure_demo_profiles(db_config)
        logger.info("Demo seed ready")

    container = build_container(db_config=db_config, settings=settings)

    register_profiles(app, container)
    register_invoices(app, container)
    register_payroll(app, container)
    register_attendance(app, container)
    register_dashboard(app, container)
    register_newsletters(app, container)
    register_backups(app, container)
    register_teams(app, container)
    register_files(app, container)

    return app
