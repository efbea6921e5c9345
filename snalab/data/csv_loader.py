"""CSV upload parsing into spreadsheet rows."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, List, Union

import pandas as pd

from snalab.errors import InputDataError

logger = logging.getLogger(__name__)

# utf-8-sig strips a BOM; euc-kr covers spreadsheets exported by Korean Excel.
ENCODINGS = ("utf-8-sig", "euc-kr")

CsvSource = Union[str, Path, bytes]


def _decode(raw: bytes) -> str:
    for encoding in ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise InputDataError("CSV file is not UTF-8 or EUC-KR encoded.")


def read_csv_frame(source: CsvSource) -> pd.DataFrame:
    """Parse CSV text into a frame with the first line as header.

    Blank lines and rows whose cells are all empty are dropped. Only empty
    cells count as missing, so labels such as "NA" or "None" survive.

    Raises:
        InputDataError: unreadable file or no data rows.
    """
    raw = Path(source).read_bytes() if isinstance(source, (str, Path)) else source
    text = _decode(raw)
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            skip_blank_lines=True,
            keep_default_na=False,
            na_values=[""],
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise InputDataError(f"CSV parsing error: {exc}") from exc

    frame = frame.dropna(how="all")
    if frame.empty:
        raise InputDataError("The CSV file contains no valid data.")
    return frame


def _cell_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def frame_to_rows(frame: pd.DataFrame) -> List[List[str]]:
    """Header row followed by stringified data rows."""
    headers = [str(col) for col in frame.columns]
    rows: List[List[str]] = [headers]
    for record in frame.itertuples(index=False, name=None):
        rows.append([_cell_text(value) for value in record])
    return rows


def load_csv_rows(source: CsvSource) -> List[List[str]]:
    """Read a CSV upload (path or raw bytes) into header + data rows."""
    frame = read_csv_frame(source)
    logger.info("Read %d CSV rows with columns %s", len(frame), list(frame.columns))
    return frame_to_rows(frame)
