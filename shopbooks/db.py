from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable

import streamlit as st

from shopbooks.config import Settings, configure_logging, get_settings
from shopbooks.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


def connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def ensure_schema(conn: sqlite3.Connection) -> None:
    # CREATE IF NOT EXISTS only, so this is safe on every startup.
    conn.executescript(SCHEMA_SQL)
    conn.commit()


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    """
    Single startup routine: one connection per database file, schema applied
    once. Pages call this on every rerun; the cache makes it idempotent.
    """
    conn = connect(db_path)
    ensure_schema(conn)
    logger.info("Opened database %s", db_path)
    return conn


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


def bootstrap() -> tuple[Settings, sqlite3.Connection]:
    """Every page starts here: settings, logging and the cached connection."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return settings, get_conn(settings.db_path)
