"""Edge record extraction from spreadsheet-shaped rows."""
from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence

from snalab.graph.columns import ColumnLayout, infer_columns, is_falsy

DEFAULT_WEIGHT = 1.0
MIN_ROW_CELLS = 3

# Leading numeric prefix, read the way a lenient float parser reads "3.5kg".
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class EdgeRecord:
    """One validated (source, target, weight) triple."""

    source: str
    target: str
    weight: float = DEFAULT_WEIGHT

    def as_row(self) -> List[Any]:
        return [self.source, self.target, self.weight]


def node_label(value: Any) -> str:
    """Render a cell as a trimmed node label (``2.0`` becomes ``"2"``)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_weight(value: Any) -> float:
    """Return a finite float for ``value`` or the default weight."""
    if value is None or isinstance(value, bool):
        return DEFAULT_WEIGHT
    if isinstance(value, numbers.Real):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return DEFAULT_WEIGHT
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return DEFAULT_WEIGHT
    return number


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if 0 <= index < len(row) else None


def extract_edge_records(rows: Sequence[Any], layout: Optional[ColumnLayout] = None) -> Iterator[EdgeRecord]:
    """Yield an EdgeRecord for each usable data row.

    Rows with fewer than three cells, or with an empty source or target, are
    skipped without error.
    """
    if not rows:
        return
    layout = layout or infer_columns(rows)

    for row in rows[layout.data_start_index:]:
        if not isinstance(row, (list, tuple)) or len(row) < MIN_ROW_CELLS:
            continue

        source = _cell(row, layout.source_index)
        target = _cell(row, layout.target_index)
        if is_falsy(source) or is_falsy(target):
            continue

        source_label = node_label(source)
        target_label = node_label(target)
        if not source_label or not target_label:
            continue

        yield EdgeRecord(
            source=source_label,
            target=target_label,
            weight=parse_weight(_cell(row, layout.weight_index)),
        )


class EdgeRecords:
    """Restartable view of the edge records in a raw table.

    Every iteration re-runs column inference and extraction against the raw
    rows, so the view always reflects the table it wraps.
    """

    def __init__(self, rows: Sequence[Any]):
        self._rows = rows

    @property
    def layout(self) -> ColumnLayout:
        return infer_columns(self._rows)

    def __iter__(self) -> Iterator[EdgeRecord]:
        return extract_edge_records(self._rows)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None
