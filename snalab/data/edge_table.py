"""Data model behind the three-column edge-list spreadsheet."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from snalab.graph.columns import is_header_row

logger = logging.getLogger(__name__)

COLUMN_COUNT = 3
COLUMN_HEADERS = ("Node 1", "Node 2", "Weight")


def empty_row() -> List[Any]:
    return [""] * COLUMN_COUNT


def is_empty_cell(value: Any) -> bool:
    return value is None or value == ""


def is_blank_row(row: Any) -> bool:
    """True for non-rows and rows whose cells are all empty."""
    if not isinstance(row, (list, tuple)):
        return True
    return all(is_empty_cell(cell) for cell in row)


def records_to_rows(records: Sequence[Mapping[str, Any]]) -> List[List[Any]]:
    """Convert dict records to rows, using the first record's key order."""
    if not records:
        return []
    headers = list(records[0].keys())
    return [[record.get(h) if record.get(h) is not None else "" for h in headers] for record in records]


@dataclass(frozen=True)
class SelectionRange:
    row_start: int
    col_start: int
    row_end: int
    col_end: int


class EdgeTable:
    """Rows shown in the spreadsheet plus the last selection.

    The table never drops below one row; deleting everything leaves a single
    row behind, and a fully emptied table holds one blank row.
    """

    def __init__(self, rows: Optional[Sequence[Sequence[Any]]] = None):
        self._rows: List[List[Any]] = [list(r) for r in rows] if rows else [empty_row()]
        self.selection: Optional[SelectionRange] = None

    @property
    def rows(self) -> List[List[Any]]:
        return [list(row) for row in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def valid_rows(self) -> List[List[Any]]:
        return [list(row) for row in self._rows if not is_blank_row(row)]

    @property
    def valid_row_count(self) -> int:
        return len(self.valid_rows)

    def load(self, data: Sequence[Any]) -> int:
        """Replace the table contents; returns the number of rows loaded.

        Accepts dict records or a 2-D list. A keyword header row is removed
        because the spreadsheet shows its own column headers.
        """
        if data and isinstance(data[0], Mapping):
            rows = records_to_rows(data)
        else:
            rows = [list(row) for row in data if isinstance(row, (list, tuple))]
            if rows and is_header_row(rows[0]):
                rows = rows[1:]

        rows = [row for row in rows if not is_blank_row(row)]
        self._rows = rows or [empty_row()]
        self.selection = None
        logger.debug("Loaded %d rows into edge table", len(rows))
        return len(rows)

    def add_row(self) -> None:
        self._rows.append(empty_row())

    def select(self, row: int, col: int, row2: int, col2: int) -> SelectionRange:
        """Remember a selection; corners may come in any order."""
        self.selection = SelectionRange(
            row_start=min(row, row2),
            col_start=min(col, col2),
            row_end=max(row, row2),
            col_end=max(col, col2),
        )
        return self.selection

    def remove_rows(self) -> List[int]:
        """Delete the selected rows (or the last row when nothing is selected).

        Returns the deleted indices, highest first. Rows are removed from the
        bottom up so earlier indices stay valid, and one row always survives.
        """
        count = len(self._rows)
        if count <= 1:
            return []

        if self.selection is not None:
            targets = {
                idx for idx in range(self.selection.row_start, self.selection.row_end + 1)
                if 0 <= idx < count
            }
        else:
            targets = {count - 1}

        ordered = sorted(targets, reverse=True)
        if len(ordered) >= count:
            # Keep the lowest-index row of the selection.
            ordered = ordered[:-1]

        for idx in ordered:
            del self._rows[idx]
        if not self._rows:
            self._rows.append(empty_row())
        self.selection = None
        return ordered

    def reset(self) -> None:
        self._rows = [empty_row()]
        self.selection = None
