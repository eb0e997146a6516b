from __future__ import annotations

from sqlite3 import Connection
from typing import Any, Dict, Iterator


def insert_review(conn: Connection, book_id: int, review_text: str, reviewer_name: str) -> int:
    cur = conn.execute(
        "INSERT INTO Reviews(book_id, review_text, reviewer_name) VALUES(?, ?, ?)",
        (book_id, review_text, reviewer_name),
    )
    return int(cur.lastrowid)


def delete_review(conn: Connection, review_id: int) -> int:
    cur = conn.execute("DELETE FROM Reviews WHERE review_id=?", (review_id,))
    return cur.rowcount


def get_one(conn: Connection, review_id: int):
    return conn.execute(
        "SELECT review_id, book_id, review_text, reviewer_name FROM Reviews WHERE review_id=?",
        (review_id,),
    ).fetchone()


def list_for_book(conn: Connection, book_id: int):
    return conn.execute(
        "SELECT review_id, book_id, review_text, reviewer_name FROM Reviews WHERE book_id=? ORDER BY review_id",
        (book_id,),
    ).fetchall()


def iter_book_reviews(conn: Connection) -> Iterator[Dict[str, Any]]:
    # Inner join: books without reviews never show up here.
    sql = (
        "SELECT b.title, b.author, r.review_text, r.reviewer_name "
        "FROM Books b JOIN Reviews r ON b.book_id = r.book_id"
    )
    for row in conn.execute(sql):
        yield dict(row)
