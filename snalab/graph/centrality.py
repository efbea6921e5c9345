"""Degree and eigenvector centrality with ranked views."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import networkx as nx
from networkx.exception import NetworkXException, PowerIterationFailedConvergence

from snalab.errors import MalformedDocumentError, MetricUnavailableError
from snalab.profiling import profile_operation, profile_phase

logger = logging.getLogger(__name__)

TOP_K = 10
DECIMALS = 3
UNAVAILABLE = "N/A"

BY_DEGREE = "degree"
BY_EIGENVECTOR = "eigenvector"
METRICS = (BY_DEGREE, BY_EIGENVECTOR)


@dataclass(frozen=True)
class CentralityEntry:
    """Centrality for one node; ``eigenvector_centrality`` is None when it did not converge."""

    node: str
    degree_centrality: float
    eigenvector_centrality: Optional[float]

    def to_dict(self) -> Dict[str, object]:
        return {
            "node": self.node,
            "degreeCentrality": self.degree_centrality,
            "eigenvectorCentrality": (
                UNAVAILABLE if self.eigenvector_centrality is None else self.eigenvector_centrality
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "CentralityEntry":
        eigen = data.get("eigenvectorCentrality")
        try:
            return cls(
                node=str(data["node"]),
                degree_centrality=float(data.get("degreeCentrality") or 0.0),
                eigenvector_centrality=None if eigen in (None, UNAVAILABLE) else float(eigen),
            )
        except (TypeError, ValueError) as exc:
            raise MalformedDocumentError(f"Bad centrality entry for node {data.get('node')!r}: {exc}") from exc


def _eigen_key(entry: CentralityEntry):
    # Ascending key: larger values first, unavailable after every number.
    if entry.eigenvector_centrality is None:
        return (1, 0.0)
    return (0, -entry.eigenvector_centrality)


def rank_entries(entries: List[CentralityEntry], metric: str = BY_DEGREE) -> List[CentralityEntry]:
    """Sort entries by ``metric`` descending with the secondary metric as tie-break.

    Unavailable eigenvector values rank after numeric ones. Remaining ties keep
    input order.
    """
    if metric == BY_DEGREE:
        return sorted(entries, key=lambda e: (-e.degree_centrality, _eigen_key(e)))
    if metric == BY_EIGENVECTOR:
        return sorted(entries, key=lambda e: (_eigen_key(e), -e.degree_centrality))
    raise ValueError(f"Unknown centrality metric '{metric}'; expected one of {METRICS}")


@dataclass
class CentralityRanking:
    """Per-node centrality for one graph, in node order."""

    entries: List[CentralityEntry]
    eigenvector_available: bool

    @property
    def available_metrics(self) -> List[str]:
        return list(METRICS) if self.eigenvector_available else [BY_DEGREE]

    def ranked(self, metric: str = BY_DEGREE) -> List[CentralityEntry]:
        if metric == BY_EIGENVECTOR and not self.eigenvector_available:
            raise MetricUnavailableError("Eigenvector centrality did not converge for this graph.")
        return rank_entries(self.entries, metric)

    def top(self, metric: str = BY_DEGREE, k: int = TOP_K) -> List[CentralityEntry]:
        return self.ranked(metric)[:k]

    def top_nodes(self, metric: str = BY_DEGREE) -> Set[str]:
        """Nodes flagged for emphasis under ``metric``."""
        return {entry.node for entry in self.top(metric)}


def compute_degree_centrality(graph: nx.Graph) -> Dict[str, float]:
    return nx.degree_centrality(graph)


def compute_eigenvector_centrality(graph: nx.Graph, *, max_iter: int = 100, tol: float = 1.0e-6) -> Optional[Dict[str, float]]:
    """Weighted eigenvector centrality, or None when it cannot be computed."""
    try:
        return nx.eigenvector_centrality(graph, max_iter=max_iter, tol=tol, weight="weight")
    except PowerIterationFailedConvergence:
        logger.warning(
            "Eigenvector centrality failed to converge in %d iterations (%d nodes, %d edges); "
            "falling back to degree-only ranking",
            max_iter, graph.number_of_nodes(), graph.number_of_edges(),
        )
    except NetworkXException as exc:
        logger.warning("Eigenvector centrality unavailable: %s", exc)
    return None


def compute_centrality(graph: nx.Graph) -> CentralityRanking:
    """Compute both metrics, rounded to three decimals, in node order."""
    with profile_operation("compute_centrality", {
        "nodes": graph.number_of_nodes(),
        "edges": graph.number_of_edges(),
    }):
        with profile_phase("degree_centrality", "compute_centrality"):
            degree = compute_degree_centrality(graph)
        with profile_phase("eigenvector_centrality", "compute_centrality"):
            eigen = compute_eigenvector_centrality(graph)

    entries = [
        CentralityEntry(
            node=node,
            degree_centrality=round(degree.get(node, 0.0), DECIMALS),
            eigenvector_centrality=round(eigen[node], DECIMALS) if eigen is not None else None,
        )
        for node in graph.nodes
    ]
    return CentralityRanking(entries=entries, eigenvector_available=eigen is not None)
