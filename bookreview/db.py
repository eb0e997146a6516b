from __future__ import annotations

# bookreview/db.py
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .services.config_svc import AppConfig

logger = logging.getLogger(__name__)


def open_conn(cfg: AppConfig) -> sqlite3.Connection:
    """
    打开 SQLite 连接：autocommit（isolation_level=None），打开 foreign_keys，
    row_factory 设为 Row。连接失败时抛出 sqlite3.Error。
    """
    conn = sqlite3.connect(
        cfg.connection_string,
        timeout=cfg.driver_timeout,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        isolation_level=None,
        uri=cfg.is_uri,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
    except sqlite3.Error:
        conn.close()
        raise
    return conn


@contextmanager
def get_conn(cfg: AppConfig) -> Iterator[sqlite3.Connection]:
    """The single process-lifetime connection; always closed on exit."""
    conn = open_conn(cfg)
    logger.info("connected to %s as %s", cfg.connection_string, cfg.username)
    try:
        yield conn
    finally:
        conn.close()
        logger.info("connection to %s closed", cfg.connection_string)
