"""Saved dataset routes.

Blueprint: /api/datasets
Data source: persistence.store (dataset table)
"""
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from snalab.api.services.document_store import open_store
from snalab.persistence import store

logger = logging.getLogger(__name__)

datasets_bp = Blueprint("datasets", __name__, url_prefix="/api/datasets")


@datasets_bp.route("", methods=["POST"])
def save_dataset_route():
    """Save edge rows.

    Payload: {"user_id": "...", "data": [[...], ...], "title": "...",
              "author": "...", "description": "..."}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    rows = data.get("data")
    if not isinstance(rows, list) or not rows:
        return jsonify({"error": "data must be a non-empty list of rows"}), 400

    conn = open_store()
    try:
        dataset_id = store.save_dataset(
            conn,
            data.get("user_id"),
            rows,
            title=data.get("title") or "",
            author=data.get("author") or "",
            description=data.get("description") or "",
            display_name=data.get("display_name") or "",
            email=data.get("email") or "",
        )
        return jsonify({"id": dataset_id}), 201
    finally:
        conn.close()


@datasets_bp.route("", methods=["GET"])
def list_datasets_route():
    """?user_id=... for one user's datasets, ?all=true for the admin view."""
    user_id = request.args.get("user_id")
    show_all = request.args.get("all", "").lower() in ("1", "true", "yes")
    if not user_id and not show_all:
        return jsonify({"error": "user_id is required"}), 400

    conn = open_store()
    try:
        if show_all:
            datasets = store.list_all_datasets(conn)
        else:
            datasets = store.list_datasets(conn, user_id)
        return jsonify({"datasets": datasets})
    finally:
        conn.close()


@datasets_bp.route("/<dataset_id>", methods=["GET"])
def load_dataset_route(dataset_id):
    conn = open_store()
    try:
        return jsonify(store.load_dataset(conn, dataset_id))
    finally:
        conn.close()


@datasets_bp.route("/<dataset_id>", methods=["DELETE"])
def delete_dataset_route(dataset_id):
    conn = open_store()
    try:
        store.delete_dataset(conn, dataset_id)
        return jsonify({"ok": True})
    finally:
        conn.close()
