"""Narrative analysis reports built on top of an analysis snapshot."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from snalab.errors import InputDataError
from snalab.persistence.snapshot import (
    AnalysisSnapshot,
    decode_document,
    encode_document,
    export_top_centrality,
)

NARRATIVE_FIELDS = ("content", "conclusion", "limitations", "questions")


@dataclass
class Report:
    report_title: str
    author: str = ""
    content: str = ""
    conclusion: str = ""
    limitations: str = ""
    questions: str = ""
    data_id: Optional[str] = None
    data_title: str = ""
    data_description: str = ""
    data_date: str = field(default_factory=lambda: date.today().isoformat())
    snapshot: AnalysisSnapshot = field(default_factory=AnalysisSnapshot)

    def validate(self) -> None:
        if not (self.report_title or "").strip():
            raise InputDataError("Enter a report title.")
        if not self.snapshot.rows:
            raise InputDataError("No data is loaded for this report.")


def report_to_document(report: Report) -> Dict[str, Any]:
    """Store shape: narrative fields plus the encoded snapshot fields."""
    report.validate()
    document: Dict[str, Any] = {
        "reportTitle": report.report_title.strip(),
        "author": (report.author or "").strip(),
        "dataId": report.data_id,
        "dataTitle": report.data_title or "",
        "dataDescription": report.data_description or "",
        "dataDate": report.data_date or date.today().isoformat(),
    }
    for name in NARRATIVE_FIELDS:
        document[name] = (getattr(report, name) or "").strip()
    document.update(encode_document(report.snapshot))
    return document


def report_from_document(document: Mapping[str, Any]) -> Report:
    return Report(
        report_title=document.get("reportTitle") or "",
        author=document.get("author") or "",
        content=document.get("content") or "",
        conclusion=document.get("conclusion") or "",
        limitations=document.get("limitations") or "",
        questions=document.get("questions") or "",
        data_id=document.get("dataId"),
        data_title=document.get("dataTitle") or "",
        data_description=document.get("dataDescription") or "",
        data_date=document.get("dataDate") or "",
        snapshot=decode_document(document),
    )


def report_summary(report: Report) -> Dict[str, Any]:
    """Export view: narrative text, community table and the degree-sorted top 10."""
    snapshot = report.snapshot
    top = export_top_centrality(snapshot)
    communities: List[Dict[str, Any]] = [
        {"community": community, "size": len(nodes), "nodes": list(nodes)}
        for community, nodes in snapshot.community_members.items()
    ]
    summary: Dict[str, Any] = {
        "reportTitle": report.report_title or "Report",
        "author": report.author,
        "dataTitle": report.data_title,
        "dataDate": report.data_date,
        "communities": communities,
        "centrality": [entry.to_dict() for entry in top],
        "hasEigenvector": any(entry.eigenvector_centrality is not None for entry in top),
    }
    for name in NARRATIVE_FIELDS:
        summary[name] = getattr(report, name)
    return summary


def report_to_view(report: Report) -> Dict[str, Any]:
    """Decoded form for clients: arrays stay arrays, nothing is string-encoded."""
    snapshot = report.snapshot
    view: Dict[str, Any] = {
        "reportTitle": report.report_title,
        "author": report.author,
        "dataId": report.data_id,
        "dataTitle": report.data_title,
        "dataDescription": report.data_description,
        "dataDate": report.data_date,
        "data": snapshot.rows,
        "communityNodes": snapshot.community_members,
        "communityColors": snapshot.community_colors,
        "communityDetected": snapshot.community_detected,
        "centralityNodes": [entry.to_dict() for entry in snapshot.top_centrality],
    }
    for name in NARRATIVE_FIELDS:
        view[name] = getattr(report, name)
    return view
