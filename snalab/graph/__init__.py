"""Edge-list normalization and graph analysis for SNA Lab."""

from .builder import GraphBuildResult, build_graph, build_graph_from_rows, scale_node_size
from .centrality import (
    BY_DEGREE,
    BY_EIGENVECTOR,
    TOP_K,
    CentralityEntry,
    CentralityRanking,
    compute_centrality,
    rank_entries,
)
from .columns import ColumnLayout, infer_columns, is_header_row
from .communities import (
    CommunityPartition,
    community_centroids,
    compute_louvain_communities,
    partition_graph,
)
from .layout import compute_layout
from .resolution import ResolutionChange, ResolutionControl
from .rows import EdgeRecord, EdgeRecords, extract_edge_records, parse_weight

__all__ = [
    "BY_DEGREE",
    "BY_EIGENVECTOR",
    "TOP_K",
    "CentralityEntry",
    "CentralityRanking",
    "ColumnLayout",
    "CommunityPartition",
    "EdgeRecord",
    "EdgeRecords",
    "GraphBuildResult",
    "ResolutionChange",
    "ResolutionControl",
    "build_graph",
    "build_graph_from_rows",
    "community_centroids",
    "compute_centrality",
    "compute_layout",
    "compute_louvain_communities",
    "extract_edge_records",
    "infer_columns",
    "is_header_row",
    "parse_weight",
    "partition_graph",
    "rank_entries",
    "scale_node_size",
]
