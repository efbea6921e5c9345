"""Per-user analysis session: the current graph and everything derived from it."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Set

from snalab.config import AnalysisSettings, get_analysis_settings
from snalab.errors import InputDataError, NoGraphError, SessionNotFoundError
from snalab.graph.builder import DEFAULT_NODE_COLOR, GraphBuildResult, build_graph_from_rows
from snalab.graph.centrality import BY_DEGREE, CentralityEntry, CentralityRanking, compute_centrality
from snalab.graph.communities import CommunityPartition, community_centroids, partition_graph
from snalab.graph.layout import Position, compute_layout
from snalab.graph.resolution import ResolutionChange, ResolutionControl
from snalab.persistence.snapshot import AnalysisSnapshot
from snalab.profiling import profile_operation, profile_phase

logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns one graph at a time and the analytics computed on it.

    ``draw`` replaces the graph and drops the partition and ranking; every
    other operation reads the graph built by the last successful ``draw``.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.settings = settings or get_analysis_settings()
        self.resolution = ResolutionControl()
        self._disposed = False
        self._clear()

    def _clear(self) -> None:
        self.rows: List[List[Any]] = []
        self.result: Optional[GraphBuildResult] = None
        self.positions: Dict[str, Position] = {}
        self.partition: Optional[CommunityPartition] = None
        self.ranking: Optional[CentralityRanking] = None
        self.sort_metric: str = BY_DEGREE
        self.highlighted: Set[str] = set()
        self.resolution.reset()

    # ── lifecycle ─────────────────────────────────────────────────────────

    @property
    def has_graph(self) -> bool:
        return self.result is not None

    @property
    def community_detected(self) -> bool:
        return self.partition is not None

    def reset(self) -> None:
        """Drop the graph and all derived state; the session stays usable."""
        self._ensure_active()
        self._clear()
        logger.info("Session %s reset", self.session_id)

    def dispose(self) -> None:
        """Release everything; later calls raise SessionNotFoundError."""
        if self._disposed:
            return
        self._clear()
        self._disposed = True
        logger.info("Session %s disposed", self.session_id)

    def _ensure_active(self) -> None:
        if self._disposed:
            raise SessionNotFoundError(f"Session {self.session_id} has been disposed")

    def _require_graph(self) -> GraphBuildResult:
        self._ensure_active()
        if self.result is None:
            raise NoGraphError()
        return self.result

    # ── drawing ───────────────────────────────────────────────────────────

    def draw(self, rows: Sequence[Any]) -> GraphBuildResult:
        """Rebuild the graph from raw table rows and lay it out.

        Raises:
            InputDataError: no rows at all.
            EmptyGraphError: rows present but none usable.
        """
        self._ensure_active()
        if not rows:
            raise InputDataError("Load data before drawing the graph.")

        rows = [list(row) if isinstance(row, (list, tuple)) else row for row in rows]
        with profile_operation("draw_graph", {"rows": len(rows)}):
            with profile_phase("build", "draw_graph"):
                result = build_graph_from_rows(rows)

            self._clear()
            self.rows = rows
            self.result = result
            with profile_phase("layout", "draw_graph"):
                self._relayout(self.settings.layout_iterations)

        logger.info(
            "Session %s drew %d nodes / %d edges from %d rows",
            self.session_id, result.node_count(), result.edge_count(), len(rows),
        )
        return result

    def _relayout(self, iterations: int) -> None:
        result = self.result
        # Undirected so both endpoints of a stored edge attract each other.
        self.positions = compute_layout(result.undirected, iterations=iterations, seed=self.settings.louvain_seed)
        for node, coords in self.positions.items():
            result.directed.nodes[node]["x"], result.directed.nodes[node]["y"] = coords[0], coords[1]

    def layout_3d(self) -> Dict[str, Position]:
        """Fresh 3D positions for the 3D viewer; the stored 2D layout is untouched."""
        result = self._require_graph()
        return compute_layout(
            result.undirected.copy(),
            iterations=self.settings.layout_iterations,
            seed=self.settings.louvain_seed,
            dim=3,
        )

    def _set_node_color(self, node: str, color: str) -> None:
        for graph in (self.result.directed, self.result.undirected):
            graph.nodes[node]["color"] = color
            graph.nodes[node]["original_color"] = color

    # ── communities ───────────────────────────────────────────────────────

    def detect_communities(self) -> CommunityPartition:
        """Partition at the current resolution, recolour and re-lay out."""
        result = self._require_graph()
        partition = partition_graph(
            result.undirected,
            self.resolution.value,
            seed=self.settings.louvain_seed,
            color_mode=self.settings.color_mode,
        )
        for node, community in partition.membership.items():
            result.directed.nodes[node]["community"] = community
            result.undirected.nodes[node]["community"] = community
            self._set_node_color(node, partition.colors[community])

        self._relayout(self.settings.relayout_iterations)
        self.partition = partition
        return partition

    def increase_resolution(self) -> ResolutionChange:
        self._require_graph()
        change = self.resolution.increase()
        if change.notice:
            logger.info("Session %s: %s", self.session_id, change.notice)
        if change.repartition:
            self.detect_communities()
        return change

    def decrease_resolution(self) -> ResolutionChange:
        self._require_graph()
        change = self.resolution.decrease()
        if change.notice:
            logger.info("Session %s: %s", self.session_id, change.notice)
        if change.repartition:
            self.detect_communities()
        return change

    def clear_communities(self) -> None:
        """Turn community colouring off: one grey community, fresh layout."""
        result = self._require_graph()
        for node in result.directed.nodes:
            result.directed.nodes[node].pop("community", None)
            result.undirected.nodes[node].pop("community", None)
            self._set_node_color(node, DEFAULT_NODE_COLOR)
        self.partition = None
        self._relayout(self.settings.relayout_iterations)

    def community_labels(self) -> Dict[int, Dict[str, Any]]:
        """Label anchor (member centroid) and colour for each community."""
        self._require_graph()
        if self.partition is None:
            return {}
        centroids = community_centroids(self.partition, self.positions)
        return {
            cid: {"x": x, "y": y, "color": self.partition.colors.get(cid, DEFAULT_NODE_COLOR)}
            for cid, (x, y) in centroids.items()
        }

    # ── centrality ────────────────────────────────────────────────────────

    def compute_centrality(self) -> CentralityRanking:
        result = self._require_graph()
        ranking = compute_centrality(result.undirected)
        for entry in ranking.entries:
            attrs = result.directed.nodes[entry.node]
            attrs["degree_centrality"] = entry.degree_centrality
            attrs["eigenvector_centrality"] = entry.eigenvector_centrality
        self.ranking = ranking
        self.sort_metric = BY_DEGREE
        return ranking

    def rank(self, metric: Optional[str] = None) -> List[CentralityEntry]:
        """Ranked entries by ``metric`` (default: the active one); computes centrality if needed."""
        self._require_graph()
        if self.ranking is None:
            self.compute_centrality()
        metric = metric or self.sort_metric
        entries = self.ranking.ranked(metric)
        self.sort_metric = metric
        return entries

    # ── hover highlighting ────────────────────────────────────────────────

    def highlight(self, node: str) -> Set[str]:
        """Highlight ``node`` and its neighbours; unknown nodes clear the highlight."""
        result = self._require_graph()
        if node not in result.undirected:
            self.highlighted = set()
        else:
            self.highlighted = set(result.undirected.neighbors(node)) | {node}
        return self.highlighted

    def clear_highlight(self) -> None:
        self.highlighted = set()

    # ── persistence ───────────────────────────────────────────────────────

    def snapshot(self) -> AnalysisSnapshot:
        """Serializable view of rows, communities and the top-10 ranking."""
        self._ensure_active()
        members: Dict[str, List[str]] = {}
        colors: Dict[str, str] = {}
        if self.partition is not None:
            members = {str(cid): list(nodes) for cid, nodes in self.partition.members.items()}
            colors = {str(cid): color for cid, color in self.partition.colors.items()}
        top: List[CentralityEntry] = []
        if self.ranking is not None:
            top = self.ranking.top(self.sort_metric)
        return AnalysisSnapshot(
            rows=[list(row) for row in self.rows if isinstance(row, list)],
            community_members=members,
            community_colors=colors,
            community_detected=self.partition is not None,
            top_centrality=top,
        )
