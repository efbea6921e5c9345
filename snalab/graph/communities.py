"""Louvain community partitioning and community colouring."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import networkx as nx
from networkx.algorithms.community import louvain_communities

from snalab.profiling import profile_phase

logger = logging.getLogger(__name__)

# Fixed palette for the stable colour mode; cycles when there are more communities.
PALETTE: Tuple[str, ...] = (
    "#4A90E2",
    "#F76C6C",
    "#50C878",
    "#F5A623",
    "#9B59B6",
    "#1ABC9C",
    "#E67E22",
    "#34495E",
    "#E84393",
    "#7F8C8D",
)


@dataclass
class CommunityPartition:
    """Result of one partition call."""

    resolution: float
    membership: Dict[str, int]
    members: Dict[int, List[str]]
    colors: Dict[int, str] = field(default_factory=dict)

    @property
    def community_count(self) -> int:
        return len(self.members)

    def color_of(self, node: str) -> Optional[str]:
        community = self.membership.get(node)
        return self.colors.get(community) if community is not None else None


def random_hex_color(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "#" + "".join(rng.choice("0123456789ABCDEF") for _ in range(6))


def assign_colors(
    community_ids: Sequence[int],
    *,
    mode: str = "random",
    rng: Optional[random.Random] = None,
) -> Dict[int, str]:
    """Give every community id a display colour.

    ``random`` draws fresh colours on every call; ``palette`` indexes
    :data:`PALETTE` by id so colours survive repartitioning.
    """
    if mode == "palette":
        return {cid: PALETTE[cid % len(PALETTE)] for cid in community_ids}
    return {cid: random_hex_color(rng) for cid in community_ids}


def compute_louvain_communities(
    graph: nx.Graph,
    *,
    resolution: float = 1.0,
    seed: Optional[int] = 42,
) -> Dict[str, int]:
    """Map each node to a community id (requires networkx>=3.1).

    Ids are numbered by the position of each community's first member in
    node order, so the labelling follows the input rather than the optimizer.
    An edgeless or zero-weight graph is a single community.
    """
    with profile_phase("compute_louvain_communities", metadata={
        "nodes": graph.number_of_nodes(),
        "edges": graph.number_of_edges(),
        "resolution": resolution,
    }):
        if graph.number_of_edges() == 0 or graph.size(weight="weight") <= 0:
            return {node: 0 for node in graph.nodes}

        communities = louvain_communities(graph, weight="weight", resolution=resolution, seed=seed)
        order = {node: idx for idx, node in enumerate(graph.nodes)}
        ranked = sorted(communities, key=lambda members: min(order[n] for n in members))

        membership: Dict[str, int] = {}
        for idx, community in enumerate(ranked):
            for node in community:
                membership[node] = idx
        return membership


def group_members(graph: nx.Graph, membership: Mapping[str, int]) -> Dict[int, List[str]]:
    """Community id -> member labels, both in node order."""
    members: Dict[int, List[str]] = {}
    for node in graph.nodes:
        members.setdefault(membership[node], []).append(node)
    return members


def partition_graph(
    graph: nx.Graph,
    resolution: float = 1.0,
    *,
    seed: Optional[int] = 42,
    color_mode: str = "random",
    rng: Optional[random.Random] = None,
) -> CommunityPartition:
    """Partition ``graph`` and colour the resulting communities."""
    membership = compute_louvain_communities(graph, resolution=resolution, seed=seed)
    members = group_members(graph, membership)
    colors = assign_colors(list(members), mode=color_mode, rng=rng)
    logger.info(
        "Detected %d communities at resolution %.1f (%d nodes)",
        len(members), resolution, graph.number_of_nodes(),
    )
    return CommunityPartition(resolution=resolution, membership=membership, members=members, colors=colors)


def community_centroids(
    partition: CommunityPartition,
    positions: Mapping[str, Sequence[float]],
) -> Dict[int, Tuple[float, float]]:
    """Mean (x, y) of each community's placed members, used to anchor labels."""
    centroids: Dict[int, Tuple[float, float]] = {}
    for cid, nodes in partition.members.items():
        placed = [positions[n] for n in nodes if n in positions]
        if not placed:
            continue
        xs = [p[0] for p in placed]
        ys = [p[1] for p in placed]
        centroids[cid] = (sum(xs) / len(xs), sum(ys) / len(ys))
    return centroids
