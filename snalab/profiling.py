"""Timing helpers for the analysis pipeline.

Each pipeline run (draw, partition, centrality) is wrapped in
``profile_operation``; its stages are wrapped in ``profile_phase`` so a
per-run breakdown lands in the debug log.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class PhaseTiming:
    """Duration of one pipeline stage."""

    name: str
    duration_ms: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        meta_str = ", ".join(f"{k}={v}" for k, v in self.metadata.items())
        return f"{self.name}: {self.duration_ms:.2f}ms" + (f" ({meta_str})" if meta_str else "")


@dataclass
class OperationReport:
    """All stage timings collected for one pipeline run."""

    operation: str
    total_duration_ms: float = 0.0
    phases: List[PhaseTiming] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def format_report(self) -> str:
        lines = [f"{self.operation}: {self.total_duration_ms:.2f}ms"]
        for phase in sorted(self.phases, key=lambda p: p.duration_ms, reverse=True):
            lines.append(f"  {phase}")
        return "\n".join(lines)


_local = threading.local()


def _active() -> Dict[str, OperationReport]:
    """Reports of the operations running on the current thread."""
    if not hasattr(_local, "reports"):
        _local.reports = {}
    return _local.reports


@contextmanager
def profile_operation(operation: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[OperationReport]:
    """Time a whole pipeline run and log its phase breakdown.

    Usage:
        with profile_operation("draw_graph", {"rows": 120}):
            with profile_phase("build", "draw_graph"):
                ...
    """
    report = OperationReport(operation=operation, metadata=metadata or {})
    _active()[operation] = report
    start = time.perf_counter()
    try:
        yield report
    finally:
        report.total_duration_ms = (time.perf_counter() - start) * 1000
        _active().pop(operation, None)
        logger.debug(report.format_report())


@contextmanager
def profile_phase(phase_name: str, operation: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
    """Time one stage, attaching it to the enclosing operation when given."""
    start = time.perf_counter()
    try:
        yield
    finally:
        timing = PhaseTiming(
            name=phase_name,
            duration_ms=(time.perf_counter() - start) * 1000,
            metadata=metadata or {},
        )
        active = _active()
        if operation and operation in active:
            active[operation].phases.append(timing)
        logger.debug(f"Phase [{phase_name}]: {timing.duration_ms:.2f}ms")
