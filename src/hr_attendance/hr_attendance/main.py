from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import NotFoundError, UpstreamFailure, ValidationError
from .core.logging import setup_logging
from .leaves.controller import register as register_leaves

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(exc: ValidationError):
        return jsonify({"error": "validation_error", "message": str(exc)}), 400

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        return jsonify({"error": "not_found", "message": str(exc)}), 404

    @app.errorhandler(UpstreamFailure)
    def _upstream(exc: UpstreamFailure):
        logger.error("upstream failure: %s", exc, exc_info=exc)
        return jsonify({"error": "upstream_failure", "message": str(exc)}), 502


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), json=bool(getattr(settings, "LOG_JSON", True)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "starting attendance engine",
            extra={
                "settings": settings_module,
                "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
            },
        )
        container = build_container(
            db_config=db_config,
            rollup_max_workers=int(getattr(settings, "ROLLUP_MAX_WORKERS", 4)),
        )

    _register_error_handlers(app)
    register_attendance(app, container)
    register_leaves(app, container)

    return app
