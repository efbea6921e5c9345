"""
SQLite document store for saved datasets and reports.

Two tables:
  dataset: edge rows a user saved, with title/author/description metadata
  report:  narrative reports; the whole report document lives in `payload`

Datasets keep their rows JSON-stringified in `data`, the same shape reports
use for their embedded rows. Rows are decoded through snapshot.decode_rows so
older array-shaped payloads load too.

Commit contract: every writer commits before returning. Callers own the
connection and close it.
"""

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from snalab.errors import DocumentNotFoundError, InputDataError
from snalab.persistence.snapshot import decode_rows, encode_rows

USER_LIST_LIMIT = 50
ADMIN_LIST_LIMIT = 1000


SCHEMA = """
CREATE TABLE IF NOT EXISTS dataset (
    id           TEXT PRIMARY KEY,
    user_id      TEXT NOT NULL,
    display_name TEXT,
    email        TEXT,
    title        TEXT,
    author       TEXT,
    description  TEXT,
    data         TEXT NOT NULL,
    created_at   TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_dataset_user ON dataset(user_id, created_at);

CREATE TABLE IF NOT EXISTS report (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    payload     TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_report_user ON report(user_id, updated_at);
"""


def init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)
    conn.commit()


def now_utc() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise InputDataError("A user id is required.")
    return user_id


# ── Datasets ──────────────────────────────────────────────────────────────────

_DATASET_COLUMNS = "id, user_id, display_name, email, title, author, description, created_at"


def _dataset_meta(row: tuple) -> Dict[str, Any]:
    dataset_id, user_id, display_name, email, title, author, description, created_at = row
    return {
        "id": dataset_id,
        "user_id": user_id,
        "display_name": display_name or "",
        "email": email or "",
        "title": title or "",
        "author": author or "",
        "description": description or "",
        "date": created_at[:10],
        "time": created_at[11:16],
        "created_at": created_at,
    }


def save_dataset(
    conn: sqlite3.Connection,
    user_id: str,
    rows: List[List[Any]],
    title: str = "",
    author: str = "",
    description: str = "",
    display_name: str = "",
    email: str = "",
) -> str:
    """Store edge rows for a user; returns the new dataset id."""
    _require_user(user_id)
    dataset_id = uuid4().hex
    conn.execute(
        "INSERT INTO dataset (id, user_id, display_name, email, title, author, description, data, created_at)"
        " VALUES (?,?,?,?,?,?,?,?,?)",
        (dataset_id, user_id, display_name, email, title, author, description, encode_rows(rows), now_utc()),
    )
    conn.commit()
    return dataset_id


def load_dataset(conn: sqlite3.Connection, dataset_id: str) -> Dict[str, Any]:
    """Metadata plus decoded rows under "data"."""
    row = conn.execute(
        f"SELECT {_DATASET_COLUMNS}, data FROM dataset WHERE id = ?", (dataset_id,)
    ).fetchone()
    if row is None:
        raise DocumentNotFoundError(f"Dataset {dataset_id} not found")
    result = _dataset_meta(row[:-1])
    result["data"] = decode_rows(row[-1])
    return result


def list_datasets(conn: sqlite3.Connection, user_id: str, limit: int = USER_LIST_LIMIT) -> List[Dict[str, Any]]:
    """A user's datasets, newest first. Rows are not included."""
    _require_user(user_id)
    rows = conn.execute(
        f"SELECT {_DATASET_COLUMNS} FROM dataset WHERE user_id = ?"
        " ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (user_id, limit),
    ).fetchall()
    return [_dataset_meta(r) for r in rows]


def list_all_datasets(conn: sqlite3.Connection, limit: int = ADMIN_LIST_LIMIT) -> List[Dict[str, Any]]:
    rows = conn.execute(
        f"SELECT {_DATASET_COLUMNS} FROM dataset ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [_dataset_meta(r) for r in rows]


def delete_dataset(conn: sqlite3.Connection, dataset_id: str) -> None:
    cur = conn.execute("DELETE FROM dataset WHERE id = ?", (dataset_id,))
    conn.commit()
    if cur.rowcount == 0:
        raise DocumentNotFoundError(f"Dataset {dataset_id} not found")


# ── Reports ───────────────────────────────────────────────────────────────────

def _report_row(row: tuple) -> Dict[str, Any]:
    report_id, user_id, payload, created_at, updated_at = row
    document = json.loads(payload)
    document.update({
        "id": report_id,
        "userId": user_id,
        "createdAt": created_at,
        "updatedAt": updated_at,
    })
    return document


def save_report(conn: sqlite3.Connection, user_id: str, document: Dict[str, Any]) -> str:
    _require_user(user_id)
    report_id = uuid4().hex
    now = now_utc()
    conn.execute(
        "INSERT INTO report (id, user_id, payload, created_at, updated_at) VALUES (?,?,?,?,?)",
        (report_id, user_id, json.dumps(document, ensure_ascii=False), now, now),
    )
    conn.commit()
    return report_id


def update_report(conn: sqlite3.Connection, report_id: str, document: Dict[str, Any]) -> None:
    """Merge ``document`` into the stored report and bump updated_at."""
    row = conn.execute("SELECT payload FROM report WHERE id = ?", (report_id,)).fetchone()
    if row is None:
        raise DocumentNotFoundError(f"Report {report_id} not found")
    merged = json.loads(row[0])
    merged.update(document)
    conn.execute(
        "UPDATE report SET payload = ?, updated_at = ? WHERE id = ?",
        (json.dumps(merged, ensure_ascii=False), now_utc(), report_id),
    )
    conn.commit()


def load_report(conn: sqlite3.Connection, report_id: str) -> Dict[str, Any]:
    row = conn.execute(
        "SELECT id, user_id, payload, created_at, updated_at FROM report WHERE id = ?",
        (report_id,),
    ).fetchone()
    if row is None:
        raise DocumentNotFoundError(f"Report {report_id} not found")
    return _report_row(row)


def list_reports(conn: sqlite3.Connection, user_id: str, limit: int = USER_LIST_LIMIT) -> List[Dict[str, Any]]:
    """A user's reports, most recently updated first."""
    _require_user(user_id)
    rows = conn.execute(
        "SELECT id, user_id, payload, created_at, updated_at FROM report"
        " WHERE user_id = ? ORDER BY updated_at DESC, rowid DESC LIMIT ?",
        (user_id, limit),
    ).fetchall()
    return [_report_row(r) for r in rows]


def list_all_reports(conn: sqlite3.Connection, limit: int = ADMIN_LIST_LIMIT) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT id, user_id, payload, created_at, updated_at FROM report"
        " ORDER BY updated_at DESC, rowid DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [_report_row(r) for r in rows]


def delete_report(conn: sqlite3.Connection, report_id: str) -> None:
    cur = conn.execute("DELETE FROM report WHERE id = ?", (report_id,))
    conn.commit()
    if cur.rowcount == 0:
        raise DocumentNotFoundError(f"Report {report_id} not found")
