#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Book Review Manager (SQLite console)

Interactive menu over two tables, Books and Reviews:
  1) Insert   add a book together with its first review
  2) Delete   remove a review by its id
  3) Update   change title/author of a book by its id
  4) View     list every book that has reviews, one line per review
  5) Quit

Notes:
- Both tables are dropped and recreated at start, and dropped again on quit.
- Connection settings come from config.yaml, BOOKREVIEW_* environment
  variables, or --db (highest priority).
"""

import argparse
import logging
import sqlite3
import sys

import yaml
from pydantic import ValidationError

from bookreview.console import ConsoleController
from bookreview.db import get_conn
from bookreview.services.config_svc import load_config
from bookreview.services.schema_svc import drop_tables, reset_schema

logger = logging.getLogger("bookreview")


def run(cfg, stdin=None) -> int:
    try:
        with get_conn(cfg) as conn:
            reset_schema(conn)
            try:
                ConsoleController(conn, cfg, stdin=stdin).run()
            finally:
                drop_tables(conn)
    except sqlite3.Error as e:
        logger.error("database failure: %s", e, exc_info=True)
        print(f"Database error: {e}")
        return 1
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Book review manager (SQLite console)")
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--db", default=None, help="SQLite path or file: URI (overrides config/env)")
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config, connection_string=args.db)
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, cfg.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return run(cfg)


if __name__ == "__main__":
    sys.exit(main())
