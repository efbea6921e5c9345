"""Header detection and source/target/weight column inference."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

# Korean tokens come from the teaching UI's column headers ("노드 1", "노드 2", "가중치").
HEADER_KEYWORDS: Tuple[str, ...] = ("source", "node", "weight", "가중치", "노드")
SOURCE_KEYWORDS: Tuple[str, ...] = ("source1", "source", "노드1", "노드")
TARGET_KEYWORDS: Tuple[str, ...] = ("source2", "target", "노드2")
WEIGHT_KEYWORDS: Tuple[str, ...] = ("weight", "가중치")

DEFAULT_SOURCE_INDEX = 0
DEFAULT_TARGET_INDEX = 1
DEFAULT_WEIGHT_INDEX = 2


@dataclass(frozen=True)
class ColumnLayout:
    """Where data rows start and which cells hold source, target and weight."""

    data_start_index: int = 0
    source_index: int = DEFAULT_SOURCE_INDEX
    target_index: int = DEFAULT_TARGET_INDEX
    weight_index: int = DEFAULT_WEIGHT_INDEX

    @property
    def has_header(self) -> bool:
        return self.data_start_index == 1


def is_falsy(value: Any) -> bool:
    """Loose emptiness check: None, "", 0, False and NaN all count as empty."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def _is_row(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _lowered(cell: Any) -> str:
    return str(cell).lower()


def is_header_row(row: Any) -> bool:
    """True when any non-null cell mentions a header keyword."""
    if not _is_row(row):
        return False
    for cell in row:
        if cell is None:
            continue
        text = _lowered(cell)
        if any(keyword in text for keyword in HEADER_KEYWORDS):
            return True
    return False


def _find_index(headers: Sequence[Any], keywords: Tuple[str, ...], exclude: Optional[int] = None) -> int:
    for idx, cell in enumerate(headers):
        if idx == exclude or is_falsy(cell):
            continue
        text = _lowered(cell)
        if any(keyword in text for keyword in keywords):
            return idx
    return -1


def infer_columns(rows: Sequence[Any]) -> ColumnLayout:
    """Classify row 0 and locate the source/target/weight columns.

    The source column is resolved first and excluded from the target search,
    so a header such as ``["source", "source2"]`` maps to 0/1. Columns that
    cannot be located fall back to positions 0/1/2.
    """
    if not rows or not is_header_row(rows[0]):
        return ColumnLayout()

    headers = rows[0]
    source_index = _find_index(headers, SOURCE_KEYWORDS)
    target_index = _find_index(headers, TARGET_KEYWORDS, exclude=source_index)
    weight_index = _find_index(headers, WEIGHT_KEYWORDS)

    return ColumnLayout(
        data_start_index=1,
        source_index=source_index if source_index >= 0 else DEFAULT_SOURCE_INDEX,
        target_index=target_index if target_index >= 0 else DEFAULT_TARGET_INDEX,
        weight_index=weight_index if weight_index >= 0 else DEFAULT_WEIGHT_INDEX,
    )
