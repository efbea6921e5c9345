"""Versioned analysis snapshots and their document-store encoding.

The store keeps nested arrays as JSON strings and community member lists as
comma-joined strings. Older documents hold plain arrays instead. Both shapes
are recognised here, once, so nothing past this module sees a string-encoded
field.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from snalab.errors import MalformedDocumentError
from snalab.graph.centrality import BY_DEGREE, CentralityEntry, rank_entries

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2
MEMBER_SEPARATOR = ","


@dataclass
class AnalysisSnapshot:
    """What survives a session: input rows and the derived community/centrality views."""

    rows: List[List[Any]] = field(default_factory=list)
    community_members: Dict[str, List[str]] = field(default_factory=dict)
    community_colors: Dict[str, str] = field(default_factory=dict)
    community_detected: bool = False
    top_centrality: List[CentralityEntry] = field(default_factory=list)
    schema_version: int = SCHEMA_VERSION


def decode_rows(value: Any) -> List[List[Any]]:
    """Edge rows from either a JSON string or a direct nested array."""
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise MalformedDocumentError(f"Stored rows are not valid JSON: {exc}") from exc
    else:
        parsed = value
    if not isinstance(parsed, list):
        raise MalformedDocumentError(f"Stored rows must be a list, got {type(parsed).__name__}")
    return [list(row) if isinstance(row, (list, tuple)) else row for row in parsed]


def encode_rows(rows: List[List[Any]]) -> str:
    return json.dumps(rows, ensure_ascii=False)


def decode_members(value: Mapping[str, Any]) -> Dict[str, List[str]]:
    members: Dict[str, List[str]] = {}
    for community, nodes in (value or {}).items():
        if isinstance(nodes, str):
            members[str(community)] = nodes.split(MEMBER_SEPARATOR) if nodes else []
        else:
            members[str(community)] = [str(n) for n in nodes or []]
    return members


def decode_centrality(value: Any) -> List[CentralityEntry]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable centrality payload in stored document")
            return []
    if not isinstance(value, list):
        return []
    return [CentralityEntry.from_dict(item) for item in value if isinstance(item, dict) and "node" in item]


def encode_document(snapshot: AnalysisSnapshot) -> Dict[str, Any]:
    """Flatten a snapshot into the store's field shapes."""
    return {
        "schemaVersion": snapshot.schema_version,
        "data": encode_rows(snapshot.rows),
        "communityNodes": {
            community: MEMBER_SEPARATOR.join(nodes)
            for community, nodes in snapshot.community_members.items()
        },
        "communityColors": dict(snapshot.community_colors),
        "communityDetected": snapshot.community_detected,
        "centralityNodes": json.dumps(
            [entry.to_dict() for entry in snapshot.top_centrality], ensure_ascii=False
        ),
    }


def decode_document(document: Mapping[str, Any]) -> AnalysisSnapshot:
    """Rebuild a snapshot from a stored document of either shape."""
    return AnalysisSnapshot(
        rows=decode_rows(document.get("data")),
        community_members=decode_members(document.get("communityNodes") or {}),
        community_colors={str(k): str(v) for k, v in (document.get("communityColors") or {}).items()},
        community_detected=bool(document.get("communityDetected", bool(document.get("communityNodes")))),
        top_centrality=decode_centrality(document.get("centralityNodes")),
        schema_version=SCHEMA_VERSION,
    )


def export_top_centrality(snapshot: AnalysisSnapshot) -> List[CentralityEntry]:
    """Top entries ordered by degree centrality, as the static report lists them."""
    return rank_entries(snapshot.top_centrality, BY_DEGREE)
