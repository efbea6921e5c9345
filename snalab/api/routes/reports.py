"""Report routes: save, update, load, list, delete and export summary.

Blueprint: /api/reports
Data source: persistence.store (report table)

A report body carries the narrative fields (reportTitle, author, content,
conclusion, limitations, questions, dataId, dataTitle, dataDescription,
dataDate). Its analysis snapshot comes either from a live session
("session_id") or from snapshot fields embedded in the body.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from snalab.api.services.document_store import open_store
from snalab.persistence import store
from snalab.persistence.reports import (
    Report,
    report_from_document,
    report_summary,
    report_to_document,
    report_to_view,
)

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _report_from_body(body: Dict[str, Any]) -> Report:
    report = report_from_document(body)
    session_id = body.get("session_id")
    if session_id:
        report.snapshot = current_app.config["SESSION_REGISTRY"].get(session_id).snapshot()
    return report


def _with_id(stored: Dict[str, Any]) -> Dict[str, Any]:
    view = report_to_view(report_from_document(stored))
    view.update({
        "id": stored["id"],
        "userId": stored["userId"],
        "createdAt": stored["createdAt"],
        "updatedAt": stored["updatedAt"],
    })
    return view


@reports_bp.route("", methods=["POST"])
def save_report_route():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    document = report_to_document(_report_from_body(body))
    conn = open_store()
    try:
        report_id = store.save_report(conn, body.get("user_id"), document)
        return jsonify({"id": report_id}), 201
    finally:
        conn.close()


@reports_bp.route("", methods=["GET"])
def list_reports_route():
    """?user_id=... for one user's reports, ?all=true for the admin view."""
    user_id = request.args.get("user_id")
    show_all = request.args.get("all", "").lower() in ("1", "true", "yes")
    if not user_id and not show_all:
        return jsonify({"error": "user_id is required"}), 400

    conn = open_store()
    try:
        stored = store.list_all_reports(conn) if show_all else store.list_reports(conn, user_id)
        return jsonify({"reports": [_with_id(doc) for doc in stored]})
    finally:
        conn.close()


@reports_bp.route("/<report_id>", methods=["GET"])
def load_report_route(report_id):
    conn = open_store()
    try:
        return jsonify(_with_id(store.load_report(conn, report_id)))
    finally:
        conn.close()


@reports_bp.route("/<report_id>", methods=["PUT"])
def update_report_route(report_id):
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    document = report_to_document(_report_from_body(body))
    conn = open_store()
    try:
        store.update_report(conn, report_id, document)
        return jsonify({"id": report_id})
    finally:
        conn.close()


@reports_bp.route("/<report_id>", methods=["DELETE"])
def delete_report_route(report_id):
    conn = open_store()
    try:
        store.delete_report(conn, report_id)
        return jsonify({"ok": True})
    finally:
        conn.close()


@reports_bp.route("/<report_id>/summary", methods=["GET"])
def report_summary_route(report_id):
    """Export view: narrative, community table, degree-sorted top 10."""
    conn = open_store()
    try:
        stored = store.load_report(conn, report_id)
    finally:
        conn.close()
    return jsonify(report_summary(report_from_document(stored)))
