#!/usr/bin/env python
"""CLI for running the edge-list analysis pipeline on a CSV or sample dataset."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from snalab.data.csv_loader import load_csv_rows
from snalab.data.samples import list_samples, load_sample_rows
from snalab.errors import SnaLabError
from snalab.graph.centrality import BY_DEGREE, METRICS
from snalab.graph.resolution import DEFAULT_RESOLUTION, MAX_RESOLUTION, MIN_RESOLUTION, ResolutionControl
from snalab.logging_utils import setup_logging
from snalab.persistence.snapshot import encode_document
from snalab.presentation import centrality_payload, partition_payload
from snalab.session import AnalysisSession

DEFAULT_OUTPUT = Path("analysis_output.json")

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze a weighted edge list")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--csv",
        type=Path,
        help="CSV file with Source1, Source2, Weight columns.",
    )
    source.add_argument(
        "--sample",
        choices=[sample.id for sample in list_samples()],
        help="Built-in sample dataset id.",
    )
    parser.add_argument(
        "--resolution",
        type=float,
        default=None,
        help=f"Louvain resolution ({MIN_RESOLUTION:g}-{MAX_RESOLUTION:g}); implies --communities.",
    )
    parser.add_argument(
        "--sort",
        choices=METRICS,
        default=BY_DEGREE,
        help="Centrality metric used to rank nodes.",
    )
    parser.add_argument(
        "--communities",
        action="store_true",
        help="Run Louvain community detection.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to write JSON summary.",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Print JSON summary to stdout instead of writing to a file.",
    )
    args = parser.parse_args(argv)
    if args.resolution is None:
        args.resolution = DEFAULT_RESOLUTION
    else:
        if not MIN_RESOLUTION <= args.resolution <= MAX_RESOLUTION:
            parser.error(f"--resolution must be between {MIN_RESOLUTION:g} and {MAX_RESOLUTION:g}")
        args.communities = True
    return args


def load_rows(args: argparse.Namespace) -> list:
    if args.csv is not None:
        return load_csv_rows(args.csv)
    return load_sample_rows(args.sample)


def run_analysis(rows: list, args: argparse.Namespace, session: Optional[AnalysisSession] = None) -> dict:
    session = session or AnalysisSession()
    result = session.draw(rows)

    communities = None
    if args.communities:
        session.resolution = ResolutionControl(args.resolution)
        session.detect_communities()
        communities = partition_payload(session.partition, session.resolution.value)

    session.compute_centrality()
    entries = session.rank(args.sort)
    centrality = centrality_payload(entries, session.ranking, session.sort_metric)

    return {
        "source": str(args.csv) if args.csv is not None else args.sample,
        "graph": {
            "nodes": result.node_count(),
            "edges": result.edge_count(),
            "rows": len(result.records),
        },
        "communities": communities,
        "centrality": centrality,
        "snapshot": encode_document(session.snapshot()),
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(quiet=args.summary_only)

    try:
        rows = load_rows(args)
        summary = run_analysis(rows, args)
    except SnaLabError as exc:
        logger.error("%s", exc)
        return 1

    text = json.dumps(summary, indent=2, ensure_ascii=False)
    if args.summary_only:
        print(text)
    else:
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote summary to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
