from __future__ import annotations

# bookreview/services/schema_svc.py
import logging
from sqlite3 import Connection

from ..repository import schema_repo

logger = logging.getLogger(__name__)


def drop_tables(conn: Connection):
    """Drop Reviews then Books, each only when the catalog lists it."""
    for name in (schema_repo.REVIEWS, schema_repo.BOOKS):
        if schema_repo.table_exists(conn, name):
            print(f"Dropping {name} table...")
            schema_repo.drop_table(conn, name)
            logger.info("dropped table %s", name)
    conn.commit()


def create_tables(conn: Connection):
    """Create Books then Reviews, each only when absent."""
    if not schema_repo.table_exists(conn, schema_repo.BOOKS):
        print(f"Creating {schema_repo.BOOKS} table...")
        schema_repo.create_books(conn)
        logger.info("created table %s", schema_repo.BOOKS)
    if not schema_repo.table_exists(conn, schema_repo.REVIEWS):
        print(f"Creating {schema_repo.REVIEWS} table...")
        schema_repo.create_reviews(conn)
        logger.info("created table %s", schema_repo.REVIEWS)
    conn.commit()


def reset_schema(conn: Connection):
    drop_tables(conn)
    create_tables(conn)
