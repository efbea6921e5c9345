"""Node placement: circular seed followed by force-directed relaxation."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import networkx as nx

from snalab.profiling import profile_phase

logger = logging.getLogger(__name__)

Position = Tuple[float, ...]


def compute_layout(
    graph: nx.Graph,
    *,
    iterations: int = 500,
    seed: Optional[int] = None,
    dim: int = 2,
) -> Dict[str, Position]:
    """Place nodes on a circle, then relax with Fruchterman-Reingold.

    ``weight`` pulls heavier edges tighter. ``dim=3`` gives x/y/z positions.
    Positions are also written to the ``x``/``y`` (and ``z``) node attributes.
    """
    if graph.number_of_nodes() == 0:
        return {}

    with profile_phase("layout", metadata={"nodes": graph.number_of_nodes(), "iterations": iterations}):
        initial = nx.circular_layout(graph, dim=dim) if dim == 2 else None
        raw = nx.spring_layout(
            graph,
            pos=initial,
            iterations=iterations,
            weight="weight",
            seed=seed,
            dim=dim,
        )

    positions: Dict[str, Position] = {}
    axes = ("x", "y", "z")
    for node, coords in raw.items():
        values = tuple(float(c) for c in coords)
        positions[node] = values
        for axis, value in zip(axes, values):
            graph.nodes[node][axis] = value
    return positions
