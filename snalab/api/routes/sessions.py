"""Session routes: draw, communities, resolution, centrality, snapshot.

Blueprint: /api/sessions
State: SessionRegistry in app.config["SESSION_REGISTRY"]
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from snalab.api.services.session_registry import SessionRegistry
from snalab.graph.centrality import METRICS
from snalab.persistence.snapshot import encode_document
from snalab.presentation import (
    centrality_payload,
    graph_payload,
    labels_payload,
    partition_payload,
    resolution_payload,
)
from snalab.session import AnalysisSession

logger = logging.getLogger(__name__)

sessions_bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


def _registry() -> SessionRegistry:
    return current_app.config["SESSION_REGISTRY"]


def _session(session_id: str) -> AnalysisSession:
    return _registry().get(session_id)


@sessions_bp.route("", methods=["POST"])
def create_session_route():
    session = _registry().create()
    return jsonify({"session_id": session.session_id}), 201


@sessions_bp.route("/<session_id>", methods=["DELETE"])
def dispose_session_route(session_id):
    _registry().dispose(session_id)
    return jsonify({"ok": True})


@sessions_bp.route("/<session_id>/reset", methods=["POST"])
def reset_session_route(session_id):
    _session(session_id).reset()
    return jsonify({"ok": True})


# ── Graph ────────────────────────────────────────────────────────────────


@sessions_bp.route("/<session_id>/draw", methods=["POST"])
def draw_route(session_id):
    """Build and lay out the graph from table rows.

    Payload: {"rows": [["Source1", "Source2", "Weight"], ["A", "B", 2], ...]}
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    rows = data.get("rows")
    if rows is not None and not isinstance(rows, list):
        return jsonify({"error": "rows must be a list"}), 400

    session = _session(session_id)
    session.draw(rows or [])
    return jsonify(graph_payload(session))


@sessions_bp.route("/<session_id>/graph", methods=["GET"])
def graph_route(session_id):
    """Current graph; ?dim=3 adds a z coordinate from a fresh 3D layout."""
    dim = request.args.get("dim", "2")
    if dim not in ("2", "3"):
        return jsonify({"error": "dim must be 2 or 3"}), 400
    session = _session(session_id)
    positions = session.layout_3d() if dim == "3" else None
    return jsonify(graph_payload(session, positions))


@sessions_bp.route("/<session_id>/highlight", methods=["POST"])
def highlight_route(session_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    node = data.get("node")
    if not node:
        return jsonify({"error": "node is required"}), 400
    highlighted = _session(session_id).highlight(str(node))
    return jsonify({"node": node, "highlighted": sorted(highlighted)})


@sessions_bp.route("/<session_id>/highlight", methods=["DELETE"])
def clear_highlight_route(session_id):
    _session(session_id).clear_highlight()
    return jsonify({"ok": True})


# ── Communities ──────────────────────────────────────────────────────────


@sessions_bp.route("/<session_id>/communities", methods=["POST"])
def detect_communities_route(session_id):
    session = _session(session_id)
    partition = session.detect_communities()
    payload = partition_payload(partition, session.resolution.value)
    payload["graph"] = graph_payload(session)
    return jsonify(payload)


@sessions_bp.route("/<session_id>/communities", methods=["DELETE"])
def clear_communities_route(session_id):
    session = _session(session_id)
    session.clear_communities()
    return jsonify({"detected": False, "graph": graph_payload(session)})


@sessions_bp.route("/<session_id>/resolution/<direction>", methods=["POST"])
def resolution_route(session_id, direction):
    session = _session(session_id)
    if direction == "increase":
        change = session.increase_resolution()
    elif direction == "decrease":
        change = session.decrease_resolution()
    else:
        return jsonify({"error": "direction must be 'increase' or 'decrease'"}), 404
    payload = resolution_payload(change, session)
    payload["graph"] = graph_payload(session)
    return jsonify(payload)


@sessions_bp.route("/<session_id>/communities/labels", methods=["GET"])
def community_labels_route(session_id):
    return jsonify({"labels": labels_payload(_session(session_id).community_labels())})


# ── Centrality ───────────────────────────────────────────────────────────


@sessions_bp.route("/<session_id>/centrality", methods=["POST"])
def compute_centrality_route(session_id):
    session = _session(session_id)
    ranking = session.compute_centrality()
    return jsonify(centrality_payload(session.rank(), ranking, session.sort_metric))


@sessions_bp.route("/<session_id>/centrality", methods=["GET"])
def ranked_centrality_route(session_id):
    """Ranked table; ?sort=degree|eigenvector (default: the active metric)."""
    metric = request.args.get("sort")
    if metric is not None and metric not in METRICS:
        return jsonify({"error": f"sort must be one of {list(METRICS)}"}), 400
    session = _session(session_id)
    entries = session.rank(metric)
    return jsonify(centrality_payload(entries, session.ranking, session.sort_metric))


# ── Snapshot ─────────────────────────────────────────────────────────────


@sessions_bp.route("/<session_id>/snapshot", methods=["GET"])
def snapshot_route(session_id):
    """Store-shaped snapshot of the session, ready to embed in a report."""
    return jsonify(encode_document(_session(session_id).snapshot()))
