"""Build weighted graphs from validated edge records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

import networkx as nx

from snalab.errors import EmptyGraphError
from snalab.graph.rows import EdgeRecord, EdgeRecords
from snalab.profiling import profile_operation, profile_phase

MIN_NODE_SIZE = 3.0
MAX_NODE_SIZE = 15.0
EDGE_SIZE_SCALE = 2.0
DEFAULT_NODE_COLOR = "#666"


@dataclass
class GraphBuildResult:
    """Container holding the stored (directed) graph and its undirected analysis view."""

    directed: nx.DiGraph
    undirected: nx.Graph
    records: List[EdgeRecord]

    @property
    def nodes(self) -> List[str]:
        return list(self.directed.nodes)

    def node_count(self) -> int:
        return self.directed.number_of_nodes()

    def edge_count(self) -> int:
        return self.directed.number_of_edges()


def build_graph_from_rows(rows: Sequence[Any]) -> GraphBuildResult:
    """Run column inference and row extraction, then build the graph."""
    return build_graph(EdgeRecords(rows))


def build_graph(records: Iterable[EdgeRecord]) -> GraphBuildResult:
    """Construct the graph from edge records.

    Nodes keep first-seen order. An ordered ``(source, target)`` pair is stored
    once; later rows naming the same pair are dropped, not merged.

    Raises:
        EmptyGraphError: when ``records`` is empty.
    """
    records = list(records)
    if not records:
        raise EmptyGraphError()

    with profile_operation("build_graph", {"records": len(records)}):
        with profile_phase("max_weight", "build_graph"):
            max_weight = max(record.weight for record in records)

        with profile_phase("add_nodes_edges", "build_graph"):
            directed = nx.DiGraph()
            for record in records:
                for label in (record.source, record.target):
                    if not directed.has_node(label):
                        directed.add_node(
                            label,
                            label=label,
                            color=DEFAULT_NODE_COLOR,
                            original_color=DEFAULT_NODE_COLOR,
                        )
                if directed.has_edge(record.source, record.target):
                    continue
                normalized = record.weight / max_weight if max_weight > 0 else record.weight
                directed.add_edge(
                    record.source,
                    record.target,
                    weight=record.weight,
                    size=normalized * EDGE_SIZE_SCALE,
                )

        with profile_phase("size_nodes", "build_graph"):
            _assign_node_sizes(directed)

        with profile_phase("build_undirected_view", "build_graph"):
            undirected = _build_undirected_view(directed)

    return GraphBuildResult(directed=directed, undirected=undirected, records=records)


def scale_node_size(degree: int, min_degree: int, max_degree: int) -> float:
    """Linearly map ``degree`` from ``[min_degree, max_degree]`` onto the node size range."""
    if min_degree == max_degree:
        return (MIN_NODE_SIZE + MAX_NODE_SIZE) / 2
    fraction = (degree - min_degree) / (max_degree - min_degree)
    return MIN_NODE_SIZE + fraction * (MAX_NODE_SIZE - MIN_NODE_SIZE)


def _assign_node_sizes(graph: nx.DiGraph) -> None:
    # DiGraph.degree counts in- and out-edges, so A->B plus B->A gives A degree 2.
    degrees: Dict[str, int] = dict(graph.degree())
    min_degree = min(degrees.values())
    max_degree = max(degrees.values())
    for node, degree in degrees.items():
        graph.nodes[node]["degree"] = degree
        graph.nodes[node]["size"] = scale_node_size(degree, min_degree, max_degree)


def _build_undirected_view(directed: nx.DiGraph) -> nx.Graph:
    undirected = nx.Graph()
    undirected.add_nodes_from(directed.nodes(data=True))
    for u, v, data in directed.edges(data=True):
        if undirected.has_edge(u, v):
            continue
        undirected.add_edge(u, v, **data)
    return undirected
