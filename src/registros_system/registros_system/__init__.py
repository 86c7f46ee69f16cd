"""Registros System package.

Persistence gateway (Flask + MySQL) for employee/work-assignment records,
plus the client side that stages records, imports spreadsheets and syncs
them with the gateway. Organized by feature modules (records, staging,
importer, sync) over thin controllers and service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .common.logging_setup import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .records.controller import register as register_records

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_HOST"] = getattr(settings, "API_HOST", "0.0.0.0")
    app.config["API_PORT"] = int(getattr(settings, "API_PORT", 3001))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config)

    CORS(app)
    register_records(app, container)

    return app
