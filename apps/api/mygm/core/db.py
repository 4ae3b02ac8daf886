"""
DB utilities (sqlite default).

Defaults:
- DATABASE_URL: sqlite:///./data/mygm.db

Write paths use sqlite3 directly with manual BEGIN/COMMIT so that every
multi-row operation of the simulation commits atomically. The SQLAlchemy
engine backs the typed read models and alembic.
"""
from __future__ import annotations

import contextlib
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

DEFAULT_DATABASE_URL = "sqlite:///./data/mygm.db"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _repo_root() -> Path:
    # apps/api/mygm/core/db.py -> repo root = parents[4]
    return Path(__file__).resolve().parents[4]


def _api_dir() -> Path:
    # apps/api/mygm/core/db.py -> apps/api = parents[2]
    return Path(__file__).resolve().parents[2]


def resolve_sqlite_path(database_url: str) -> Optional[Path]:
    if not database_url.startswith("sqlite:///"):
        return None
    p = database_url[len("sqlite:///") :]

    # absolute unix
    if p.startswith("/"):
        return Path(p)

    # absolute windows drive, both C:/ and C:\ forms
    if len(p) >= 3 and p[1] == ":" and (p[2] == "/" or p[2] == "\\"):
        return Path(p)

    # relative -> repo root
    return (_repo_root() / p).resolve()


def _sqlite_path() -> Path:
    url = get_database_url()
    sp = resolve_sqlite_path(url)
    if sp is None:
        raise ValueError(f"Only sqlite supported for now, got DATABASE_URL={url!r}")
    sp.parent.mkdir(parents=True, exist_ok=True)
    return sp


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is not None:
        return _engine

    url = get_database_url()
    connect_args = {}
    if url.startswith("sqlite:///"):
        connect_args = {"check_same_thread": False}

    sp = resolve_sqlite_path(url)
    if sp is not None:
        sp.parent.mkdir(parents=True, exist_ok=True)
        url = "sqlite:///" + sp.as_posix()

    _engine = create_engine(url, future=True, connect_args=connect_args)
    return _engine


def reset_engine() -> None:
    """Drop the cached engine (DATABASE_URL changed, e.g. between tests)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def connect() -> sqlite3.Connection:
    # autocommit mode; BEGIN/COMMIT are issued by write_tx()
    conn = sqlite3.connect(str(_sqlite_path()), isolation_level=None, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA busy_timeout = 5000;")
    return conn


@contextlib.contextmanager
def read_conn() -> Iterator[sqlite3.Connection]:
    conn = connect()
    try:
        yield conn
    finally:
        conn.close()


@contextlib.contextmanager
def write_tx() -> Iterator[sqlite3.Connection]:
    """One atomic unit of work.

    Validation and mutation both happen inside the same BEGIN IMMEDIATE, so a
    failed precondition (or any other exception) rolls back everything.
    """
    conn = connect()
    try:
        conn.execute("BEGIN IMMEDIATE;")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """Bring the schema to the latest alembic revision."""
    from alembic import command
    from alembic.config import Config

    _sqlite_path()
    cfg = Config()
    cfg.set_main_option("script_location", str(_api_dir() / "migrations"))
    command.upgrade(cfg, "head")


def db_health() -> Dict[str, Any]:
    url = get_database_url()
    kind = "sqlite" if url.startswith("sqlite") else "unknown"
    sp = resolve_sqlite_path(url)
    path = str(sp.as_posix()) if sp is not None else url

    try:
        eng = get_engine()
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "kind": kind, "path": path}
    except Exception as e:
        return {"status": "error", "kind": kind, "path": path, "error": str(e)}


def insert(conn: sqlite3.Connection, table: str, row: Dict[str, Any]) -> int:
    """INSERT one row (keys sorted); returns the new integer id."""
    keys = sorted(row.keys())
    sql = f"INSERT INTO {table} ({','.join(keys)}) VALUES ({','.join(['?'] * len(keys))});"
    cur = conn.execute(sql, [row[k] for k in keys])
    return int(cur.lastrowid)
