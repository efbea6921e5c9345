"""Integration tests for scripts/analyze_edges.py CLI."""
from __future__ import annotations

import json

import pytest

from scripts.analyze_edges import load_rows, main, parse_args, run_analysis
from snalab.session import AnalysisSession


@pytest.fixture
def session(fast_settings):
    return AnalysisSession(settings=fast_settings)


@pytest.fixture
def edges_csv(tmp_path):
    path = tmp_path / "edges.csv"
    path.write_text(
        "Source1,Source2,Weight\nAlice,Bob,2\nBob,Carol,1\nAlice,Carol,1\n",
        encoding="utf-8",
    )
    return path


# ==============================================================================
# Argument parsing
# ==============================================================================

@pytest.mark.unit
def test_parse_args_defaults(edges_csv):
    args = parse_args(["--csv", str(edges_csv)])
    assert args.csv == edges_csv
    assert args.sample is None
    assert args.resolution == 1.0
    assert args.sort == "degree"
    assert not args.communities


@pytest.mark.unit
def test_source_is_required():
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.unit
def test_csv_and_sample_are_exclusive(edges_csv):
    with pytest.raises(SystemExit):
        parse_args(["--csv", str(edges_csv), "--sample", "sample-1"])


@pytest.mark.unit
def test_resolution_out_of_range():
    with pytest.raises(SystemExit):
        parse_args(["--sample", "sample-1", "--resolution", "3.5"])


@pytest.mark.unit
def test_resolution_implies_communities():
    args = parse_args(["--sample", "sample-1", "--resolution", "1.6"])
    assert args.communities
    assert args.resolution == 1.6


@pytest.mark.unit
def test_unknown_sample_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--sample", "sample-99"])


# ==============================================================================
# Pipeline
# ==============================================================================

@pytest.mark.integration
def test_run_analysis_from_csv(edges_csv, session):
    args = parse_args(["--csv", str(edges_csv), "--communities"])
    summary = run_analysis(load_rows(args), args, session=session)

    assert summary["graph"] == {"nodes": 3, "edges": 3, "rows": 3}
    assert summary["communities"]["detected"]
    assert sum(c["size"] for c in summary["communities"]["communities"]) == 3
    assert len(summary["centrality"]["entries"]) == 3
    assert summary["snapshot"]["communityDetected"]


@pytest.mark.integration
def test_run_analysis_sample_by_eigenvector(session):
    args = parse_args(["--sample", "sample-florentine", "--sort", "eigenvector"])
    summary = run_analysis(load_rows(args), args, session=session)

    assert summary["communities"] is None
    assert summary["centrality"]["sort"] == "eigenvector"
    entries = summary["centrality"]["entries"]
    values = [e["eigenvectorCentrality"] for e in entries]
    assert values == sorted(values, reverse=True)


@pytest.mark.integration
def test_main_writes_output(edges_csv, tmp_path, monkeypatch):
    monkeypatch.setenv("SNALAB_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SNALAB_LAYOUT_ITERATIONS", "10")
    monkeypatch.setenv("SNALAB_RELAYOUT_ITERATIONS", "5")
    output = tmp_path / "summary.json"

    assert main(["--csv", str(edges_csv), "--output", str(output)]) == 0
    summary = json.loads(output.read_text(encoding="utf-8"))
    assert summary["graph"]["nodes"] == 3


@pytest.mark.integration
def test_main_reports_bad_input(tmp_path, monkeypatch):
    monkeypatch.setenv("SNALAB_LOG_DIR", str(tmp_path / "logs"))
    empty = tmp_path / "empty.csv"
    empty.write_text("Source1,Source2,Weight\n", encoding="utf-8")

    assert main(["--csv", str(empty), "--summary-only"]) == 1


@pytest.mark.integration
def test_run_analysis_uses_requested_resolution(session):
    args = parse_args(["--sample", "sample-florentine", "--resolution", "1.6"])
    summary = run_analysis(load_rows(args), args, session=session)

    assert summary["communities"]["detected"]
    assert summary["communities"]["resolution"] == 1.6
