from __future__ import annotations

from sqlite3 import Connection
from typing import Optional


def insert_book(conn: Connection, title: str, author: str) -> Optional[int]:
    cur = conn.execute(
        "INSERT INTO Books(title, author) VALUES(?, ?)",
        (title, author),
    )
    return int(cur.lastrowid) if cur.lastrowid else None


def update_book(conn: Connection, book_id: int, title: str, author: str) -> int:
    cur = conn.execute(
        "UPDATE Books SET title=?, author=? WHERE book_id=?",
        (title, author, book_id),
    )
    return cur.rowcount


def get_one(conn: Connection, book_id: int):
    return conn.execute(
        "SELECT book_id, title, author FROM Books WHERE book_id=?",
        (book_id,),
    ).fetchone()


def count_all(conn: Connection) -> int:
    return int(conn.execute("SELECT COUNT(1) AS c FROM Books").fetchone()["c"])
