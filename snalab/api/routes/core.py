"""Core health check routes."""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from snalab import __version__

core_bp = Blueprint("core", __name__)


@core_bp.route("/health", methods=["GET"])
@core_bp.route("/api/health", methods=["GET"])
def health_check():
    """Simple health check, plus live session counters."""
    registry = current_app.config["SESSION_REGISTRY"]
    return jsonify({
        "status": "ok",
        "service": "snalab",
        "version": __version__,
        "sessions": registry.stats(),
    })
