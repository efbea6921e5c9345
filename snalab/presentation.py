"""JSON-ready views of session state, shared by the API and the CLI."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from snalab.graph.centrality import BY_DEGREE, CentralityEntry, CentralityRanking, TOP_K
from snalab.graph.communities import CommunityPartition
from snalab.graph.resolution import ResolutionChange
from snalab.session import AnalysisSession

# Nodes outside a hover highlight are greyed out and unlabeled.
DIMMED_COLOR = "#E2E2E2"


def graph_payload(session: AnalysisSession, positions: Optional[Mapping[str, Sequence[float]]] = None) -> Dict[str, Any]:
    """Nodes and edges for the viewer.

    ``positions`` replaces the stored 2D layout (the 3D viewer passes x/y/z).
    """
    result = session.result
    if result is None:
        return {"nodes": [], "edges": []}

    highlighted = session.highlighted
    nodes: List[Dict[str, Any]] = []
    for node, attrs in result.directed.nodes(data=True):
        dimmed = bool(highlighted) and node not in highlighted
        entry = {
            "id": node,
            "label": None if dimmed else attrs.get("label", node),
            "x": attrs.get("x", 0.0),
            "y": attrs.get("y", 0.0),
            "size": attrs.get("size"),
            "degree": attrs.get("degree"),
            "color": DIMMED_COLOR if dimmed else attrs.get("color"),
            "community": attrs.get("community"),
            "highlighted": node in highlighted,
        }
        if positions is not None and node in positions:
            entry.update(zip(("x", "y", "z"), positions[node]))
        nodes.append(entry)

    edges: List[Dict[str, Any]] = []
    for source, target, attrs in result.directed.edges(data=True):
        edges.append({
            "source": source,
            "target": target,
            "weight": attrs.get("weight"),
            "size": attrs.get("size"),
            "hidden": bool(highlighted) and not (source in highlighted and target in highlighted),
        })

    return {
        "nodes": nodes,
        "edges": edges,
        "node_count": result.node_count(),
        "edge_count": result.edge_count(),
    }


def partition_payload(partition: Optional[CommunityPartition], resolution: float) -> Dict[str, Any]:
    if partition is None:
        return {"detected": False, "resolution": resolution, "communities": []}
    return {
        "detected": True,
        "resolution": resolution,
        "community_count": partition.community_count,
        "communities": [
            {
                "id": cid,
                "color": partition.colors.get(cid),
                "size": len(members),
                "members": list(members),
            }
            for cid, members in partition.members.items()
        ],
    }


def resolution_payload(change: ResolutionChange, session: AnalysisSession) -> Dict[str, Any]:
    payload = partition_payload(session.partition, change.value)
    payload["notice"] = change.notice
    payload["repartitioned"] = change.repartition
    return payload


def centrality_payload(entries: List[CentralityEntry], ranking: CentralityRanking, metric: str = BY_DEGREE) -> Dict[str, Any]:
    """Ranked rows; the first TOP_K are flagged for highlighting."""
    return {
        "sort": metric,
        "available_metrics": list(ranking.available_metrics),
        "eigenvector_available": ranking.eigenvector_available,
        "entries": [
            dict(entry.to_dict(), rank=idx + 1, top=idx < TOP_K)
            for idx, entry in enumerate(entries)
        ],
    }


def labels_payload(labels: Dict[int, Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"community": cid, "text": f"Community {cid}", **anchor}
        for cid, anchor in sorted(labels.items())
    ]
