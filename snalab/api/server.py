"""Flask application factory."""
from __future__ import annotations

import json
import logging
import math
import os
import sqlite3
import time
from pathlib import Path
from typing import Any, Optional

from flask import Flask, Response
from flask_cors import CORS

from snalab.api.routes.core import core_bp
from snalab.api.routes.datasets import datasets_bp
from snalab.api.routes.inputs import inputs_bp
from snalab.api.routes.reports import reports_bp
from snalab.api.routes.sessions import sessions_bp
from snalab.api.services.session_registry import SessionRegistry
from snalab.config import get_analysis_settings, get_db_path, get_log_dir, get_session_limits
from snalab.errors import (
    DocumentNotFoundError,
    SessionNotFoundError,
    SnaLabError,
)
from snalab.logging_utils import build_file_handler

logger = logging.getLogger(__name__)


def _sanitize_json_value(value: Any) -> Any:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    if isinstance(value, dict):
        return {k: _sanitize_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_value(v) for v in value]
    return value


class SafeJSONEncoder(json.JSONEncoder):
    """JSON encoder that converts NaN/Infinity to null for strict JSON compliance."""

    def encode(self, o: Any) -> str:  # noqa: N802 - matches json.JSONEncoder API
        return super().encode(_sanitize_json_value(o))


def safe_jsonify(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON Response that is robust to NaN/Infinity without requiring app context."""
    data = SafeJSONEncoder(ensure_ascii=False).encode(payload)
    return Response(data, status=status, mimetype="application/json")


def _error_status(exc: SnaLabError) -> int:
    if isinstance(exc, (SessionNotFoundError, DocumentNotFoundError)):
        return 404
    return 400


def create_app(config_overrides: Optional[dict] = None) -> Flask:
    """Initialize and configure the Flask application."""
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes by default

    # 1. Configuration
    app.config["STARTUP_TIME"] = time.time()
    app.config["DB_PATH"] = str(get_db_path())
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(Path(app.config.get("LOG_DIR") or get_log_dir()))

    # 2. Services
    settings = app.config.get("ANALYSIS_SETTINGS") or get_analysis_settings()
    limits = app.config.get("SESSION_LIMITS") or get_session_limits()
    app.config["SESSION_REGISTRY"] = SessionRegistry(
        settings=settings,
        max_sessions=limits.max_sessions,
        idle_ttl_seconds=limits.idle_ttl_seconds,
    )

    # 3. Blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(sessions_bp)
    app.register_blueprint(inputs_bp)
    app.register_blueprint(datasets_bp)
    app.register_blueprint(reports_bp)

    # 4. Error mapping
    @app.errorhandler(SnaLabError)
    def handle_domain_error(exc: SnaLabError):
        status = _error_status(exc)
        logger.info("Request rejected (%d): %s", status, exc)
        return safe_jsonify({"error": str(exc), "type": type(exc).__name__}, status=status)

    @app.errorhandler(sqlite3.Error)
    def handle_store_error(exc: sqlite3.Error):
        logger.exception("Document store operation failed")
        return safe_jsonify({"error": "Document store operation failed"}, status=500)

    logger.info("SNA Lab API initialized (db=%s)", app.config["DB_PATH"])
    return app


def _configure_logging(log_dir: Path) -> None:
    """Attach the rotating api.log handler to the root logger, once per path."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = (log_dir / "api.log").resolve()
    level = getattr(logging, os.getenv("API_LOG_LEVEL", "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    for handler in root.handlers:
        if getattr(handler, "baseFilename", None) == str(log_path):
            return

    root.setLevel(level)
    root.addHandler(build_file_handler(log_path, level))


if __name__ == "__main__":
    # Dev server entry point
    app = create_app()
    port = int(os.getenv("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=True)
