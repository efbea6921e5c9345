"""Snapshots, reports and the SQLite document store."""

from .reports import Report, report_from_document, report_summary, report_to_document, report_to_view
from .snapshot import AnalysisSnapshot, decode_document, encode_document, export_top_centrality

__all__ = [
    "AnalysisSnapshot",
    "Report",
    "decode_document",
    "encode_document",
    "export_top_centrality",
    "report_from_document",
    "report_summary",
    "report_to_document",
    "report_to_view",
]
