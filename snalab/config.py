"""Configuration helpers for SNA Lab."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = PROJECT_ROOT / ".env"

# Load environment variables early so downstream modules can rely on them.
load_dotenv(ENV_PATH, override=False)

DB_PATH_ENV = "SNALAB_DB_PATH"
LAYOUT_ITERATIONS_ENV = "SNALAB_LAYOUT_ITERATIONS"
RELAYOUT_ITERATIONS_ENV = "SNALAB_RELAYOUT_ITERATIONS"
LOUVAIN_SEED_ENV = "SNALAB_LOUVAIN_SEED"
COMMUNITY_COLORS_ENV = "SNALAB_COMMUNITY_COLORS"
LOG_DIR_ENV = "SNALAB_LOG_DIR"
MAX_SESSIONS_ENV = "SNALAB_MAX_SESSIONS"
SESSION_TTL_ENV = "SNALAB_SESSION_TTL_SECONDS"

DEFAULT_DB_PATH = PROJECT_ROOT / "data" / "snalab.db"
DEFAULT_LAYOUT_ITERATIONS = 500
DEFAULT_RELAYOUT_ITERATIONS = 300
DEFAULT_LOUVAIN_SEED = 42
DEFAULT_COMMUNITY_COLORS = "random"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_MAX_SESSIONS = 200
DEFAULT_SESSION_TTL_SECONDS = 2 * 60 * 60

COLOR_MODES = ("random", "palette")


@dataclass(frozen=True)
class AnalysisSettings:
    """Tuning knobs for layout and community detection."""

    layout_iterations: int
    relayout_iterations: int
    louvain_seed: Optional[int]
    color_mode: str


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer; received '{raw}'.") from exc


def get_db_path() -> Path:
    """Resolve the SQLite document store path."""

    raw_path = _get_env(DB_PATH_ENV, str(DEFAULT_DB_PATH))
    return Path(raw_path).expanduser().resolve()


def get_log_dir() -> Path:
    raw_path = _get_env(LOG_DIR_ENV, str(DEFAULT_LOG_DIR))
    return Path(raw_path).expanduser()


def get_analysis_settings() -> AnalysisSettings:
    """Resolve layout/community settings from environment with sensible defaults."""

    layout_iterations = _get_int(LAYOUT_ITERATIONS_ENV, DEFAULT_LAYOUT_ITERATIONS)
    relayout_iterations = _get_int(RELAYOUT_ITERATIONS_ENV, DEFAULT_RELAYOUT_ITERATIONS)
    if layout_iterations < 1 or relayout_iterations < 1:
        raise RuntimeError("Layout iteration counts must be positive integers.")

    raw_seed = _get_env(LOUVAIN_SEED_ENV)
    if raw_seed is None:
        seed: Optional[int] = DEFAULT_LOUVAIN_SEED
    elif raw_seed.lower() == "none":
        seed = None
    else:
        seed = _get_int(LOUVAIN_SEED_ENV, DEFAULT_LOUVAIN_SEED)

    color_mode = (_get_env(COMMUNITY_COLORS_ENV, DEFAULT_COMMUNITY_COLORS) or "").lower()
    if color_mode not in COLOR_MODES:
        raise RuntimeError(
            f"{COMMUNITY_COLORS_ENV} must be one of {', '.join(COLOR_MODES)}; received '{color_mode}'."
        )

    return AnalysisSettings(
        layout_iterations=layout_iterations,
        relayout_iterations=relayout_iterations,
        louvain_seed=seed,
        color_mode=color_mode,
    )


@dataclass(frozen=True)
class SessionLimits:
    """Bounds on live analysis sessions held by the API server."""

    max_sessions: int
    idle_ttl_seconds: int


def get_session_limits() -> SessionLimits:
    """Resolve session registry bounds; a TTL of 0 disables idle expiry."""

    max_sessions = _get_int(MAX_SESSIONS_ENV, DEFAULT_MAX_SESSIONS)
    if max_sessions < 1:
        raise RuntimeError(f"{MAX_SESSIONS_ENV} must be a positive integer; received '{max_sessions}'.")
    idle_ttl = _get_int(SESSION_TTL_ENV, DEFAULT_SESSION_TTL_SECONDS)
    if idle_ttl < 0:
        raise RuntimeError(f"{SESSION_TTL_ENV} must be zero or a positive integer; received '{idle_ttl}'.")
    return SessionLimits(max_sessions=max_sessions, idle_ttl_seconds=idle_ttl)
