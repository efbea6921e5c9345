"""Catalogue of sample datasets for the "load sample" dialog."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

import networkx as nx

from snalab.data.csv_loader import load_csv_rows
from snalab.errors import DocumentNotFoundError

SAMPLE_DIR = Path(__file__).resolve().parent / "sample_data"
SAMPLE_HEADER = ["Source1", "Source2", "Weight"]


@dataclass(frozen=True)
class SampleDataset:
    id: str
    name: str
    description: str
    loader: Callable[[], List[List[object]]]

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


def graph_to_rows(graph: nx.Graph, *, weight: str = "weight") -> List[List[object]]:
    """Header plus one row per edge, labels stringified."""
    rows: List[List[object]] = [list(SAMPLE_HEADER)]
    for u, v, data in graph.edges(data=True):
        rows.append([str(u), str(v), data.get(weight, 1)])
    return rows


def _csv_loader(filename: str) -> Callable[[], List[List[object]]]:
    return lambda: load_csv_rows(SAMPLE_DIR / filename)


def _star_rows() -> List[List[object]]:
    star = nx.relabel_nodes(nx.star_graph(8), lambda n: "Center" if n == 0 else f"Leaf {n}")
    return graph_to_rows(star)


def _karate_rows() -> List[List[object]]:
    graph = nx.karate_club_graph()
    return graph_to_rows(nx.relabel_nodes(graph, lambda n: f"Member {n + 1}"))


SAMPLES: Dict[str, SampleDataset] = {
    sample.id: sample
    for sample in (
        SampleDataset(
            id="sample-1",
            name="Classroom friendship network",
            description=(
                "Close friendships in a fictional class. Look for the cliques that "
                "form and for students left on the edge of the network."
            ),
            loader=_csv_loader("classroom.csv"),
        ),
        SampleDataset(
            id="sample-4",
            name="Star graph",
            description="A basic star: one central node connected to every other node.",
            loader=_star_rows,
        ),
        SampleDataset(
            id="sample-karate",
            name="Zachary's karate club",
            description=(
                "Interactions between members of a university karate club that later "
                "split in two; a classic community-detection benchmark."
            ),
            loader=_karate_rows,
        ),
        SampleDataset(
            id="sample-les-miserables",
            name="Les Miserables characters",
            description="Co-appearance counts of characters in Victor Hugo's novel.",
            loader=lambda: graph_to_rows(nx.les_miserables_graph()),
        ),
        SampleDataset(
            id="sample-florentine",
            name="Florentine families",
            description="Marriage ties between Renaissance Florentine families.",
            loader=lambda: graph_to_rows(nx.florentine_families_graph()),
        ),
    )
}


def list_samples() -> List[SampleDataset]:
    return list(SAMPLES.values())


def get_sample(sample_id: str) -> Optional[SampleDataset]:
    return SAMPLES.get(sample_id)


def load_sample_rows(sample_id: str) -> List[List[object]]:
    sample = get_sample(sample_id)
    if sample is None:
        raise DocumentNotFoundError(f"Unknown sample dataset '{sample_id}'")
    return sample.loader()
