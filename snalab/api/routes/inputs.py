"""Input routes: sample catalogue and CSV upload parsing."""
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from snalab.data.csv_loader import load_csv_rows
from snalab.data.edge_table import EdgeTable
from snalab.data.samples import get_sample, list_samples, load_sample_rows

logger = logging.getLogger(__name__)

inputs_bp = Blueprint("inputs", __name__, url_prefix="/api")


@inputs_bp.route("/samples", methods=["GET"])
def list_samples_route():
    return jsonify({"samples": [sample.to_dict() for sample in list_samples()]})


@inputs_bp.route("/samples/<sample_id>", methods=["GET"])
def get_sample_route(sample_id):
    """Sample metadata plus its rows (header row included)."""
    rows = load_sample_rows(sample_id)
    payload = get_sample(sample_id).to_dict()
    payload["rows"] = rows
    return jsonify(payload)


@inputs_bp.route("/uploads/csv", methods=["POST"])
def upload_csv_route():
    """Parse an uploaded CSV into spreadsheet rows.

    Accepts a multipart "file" field or a raw request body. The response
    mirrors what the spreadsheet shows: header row removed, blank rows dropped.
    """
    upload = request.files.get("file")
    raw = upload.read() if upload is not None else request.get_data()
    if not raw:
        return jsonify({"error": "No CSV file was uploaded."}), 400

    rows = load_csv_rows(raw)
    table = EdgeTable()
    loaded = table.load(rows)
    logger.info("Parsed CSV upload into %d rows", loaded)
    return jsonify({"rows": table.rows, "row_count": loaded})
