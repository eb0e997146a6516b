from __future__ import annotations

from sqlite3 import Connection

BOOKS = "Books"
REVIEWS = "Reviews"

# Empty strings are rejected explicitly; SQLite stores '' as a value, not NULL.
BOOKS_DDL = """
CREATE TABLE Books (
    book_id INTEGER PRIMARY KEY AUTOINCREMENT,
    title VARCHAR(255) NOT NULL CHECK (title <> '' AND length(title) <= 255),
    author VARCHAR(255) NOT NULL CHECK (author <> '' AND length(author) <= 255)
)
"""

REVIEWS_DDL = """
CREATE TABLE Reviews (
    review_id INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id INTEGER NOT NULL,
    review_text VARCHAR(1000) NOT NULL CHECK (review_text <> '' AND length(review_text) <= 1000),
    reviewer_name VARCHAR(255) NOT NULL CHECK (reviewer_name <> '' AND length(reviewer_name) <= 255),
    FOREIGN KEY (book_id) REFERENCES Books(book_id)
)
"""


def table_exists(conn: Connection, name: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type='table' AND name=? COLLATE NOCASE",
        (name,),
    ).fetchone()
    return row is not None


def create_books(conn: Connection):
    conn.execute(BOOKS_DDL)


def create_reviews(conn: Connection):
    conn.execute(REVIEWS_DDL)


def drop_table(conn: Connection, name: str):
    if name not in (BOOKS, REVIEWS):
        raise ValueError(f"unknown table: {name}")
    conn.execute(f"DROP TABLE {name}")


def table_ddl(conn: Connection) -> dict[str, str]:
    rows = conn.execute(
        "SELECT name, sql FROM sqlite_master WHERE type='table' AND name IN (?, ?)",
        (BOOKS, REVIEWS),
    ).fetchall()
    return {r["name"]: r["sql"] for r in rows}
