"""Connection helper for the SQLite document store used by the API."""
from __future__ import annotations

import sqlite3
from pathlib import Path

from flask import current_app

from snalab.config import get_db_path
from snalab.persistence import store


def get_store_path() -> Path:
    """App-configured DB_PATH wins over SNALAB_DB_PATH / the default."""
    configured = current_app.config.get("DB_PATH")
    return Path(configured) if configured else get_db_path()


def open_store() -> sqlite3.Connection:
    """Open a connection with the schema in place; callers close it."""
    db_path = get_store_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    store.init_db(conn)
    return conn
