"""Shared pytest configuration and fixtures for the test suite.

This module centralizes:
- Path setup (eliminates sys.path hacks in individual test files)
- Pytest markers for test categorization (unit, integration)
- Small edge tables reused across graph, session and API tests
- Fast analysis settings and temporary document stores
"""
from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

import pytest


# ==============================================================================
# Path Setup - Ensures snalab/ is importable
# ==============================================================================

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from snalab.config import AnalysisSettings  # noqa: E402
from snalab.persistence.store import init_db  # noqa: E402


# ==============================================================================
# Pytest Configuration
# ==============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "unit: Fast tests with no I/O",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests hitting SQLite, the file system, or the Flask app",
    )


# ==============================================================================
# Edge Tables
# ==============================================================================

@pytest.fixture
def triangle_rows():
    """Header plus three edges forming a triangle."""
    return [
        ["Source1", "Source2", "Weight"],
        ["Alice", "Bob", 2],
        ["Bob", "Carol", 1],
        ["Alice", "Carol", 1],
    ]


@pytest.fixture
def two_cliques_rows():
    """Two dense 4-cliques joined by one weak bridge."""
    rows = [["Source1", "Source2", "Weight"]]
    for group in (("a1", "a2", "a3", "a4"), ("b1", "b2", "b3", "b4")):
        for i, u in enumerate(group):
            for v in group[i + 1:]:
                rows.append([u, v, 5])
    rows.append(["a1", "b1", 1])
    return rows


# ==============================================================================
# Settings / Storage
# ==============================================================================

@pytest.fixture
def fast_settings():
    """Few layout iterations and stable palette colours keep tests quick and deterministic."""
    return AnalysisSettings(
        layout_iterations=20,
        relayout_iterations=10,
        louvain_seed=42,
        color_mode="palette",
    )


@pytest.fixture
def store_conn(tmp_path):
    """SQLite connection with the document store schema applied."""
    conn = sqlite3.connect(str(tmp_path / "snalab.db"))
    init_db(conn)
    try:
        yield conn
    finally:
        conn.close()
