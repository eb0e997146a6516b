from __future__ import annotations

# bookreview/services/review_svc.py
import logging
import os
from datetime import datetime
from sqlite3 import Connection
from typing import Any, Dict, Iterable, Iterator

import pandas as pd

from ..repository import book_repo, review_repo

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["title", "author", "review_text", "reviewer_name"]


class GeneratedKeyError(RuntimeError):
    """The database did not hand back the id of a freshly inserted book."""


def insert_book_with_review(
    conn: Connection,
    title: str,
    author: str,
    review_text: str,
    reviewer_name: str,
    atomic: bool = False,
) -> int:
    """
    Insert a book, read its generated id, then insert the review for it.

    Non-atomic by default: if the id cannot be read (or the review insert
    fails) the book row stays behind without a review. With atomic=True
    both inserts share one transaction and a failure rolls back the book.
    """
    if atomic:
        conn.execute("BEGIN")
    try:
        book_id = book_repo.insert_book(conn, title, author)
        if book_id is None:
            raise GeneratedKeyError("Failed to retrieve generated book ID.")
        review_id = review_repo.insert_review(conn, book_id, review_text, reviewer_name)
    except Exception:
        if atomic:
            conn.execute("ROLLBACK")
            logger.warning("book and review insert rolled back")
        raise
    if atomic:
        conn.execute("COMMIT")
    else:
        conn.commit()
    logger.info("inserted book %s with review %s", book_id, review_id)
    return book_id


def delete_review(conn: Connection, review_id: int) -> int:
    affected = review_repo.delete_review(conn, review_id)
    conn.commit()
    logger.info("delete review %s: %d row(s)", review_id, affected)
    return affected


def update_book(conn: Connection, book_id: int, new_title: str, new_author: str) -> int:
    affected = book_repo.update_book(conn, book_id, new_title, new_author)
    conn.commit()
    logger.info("update book %s: %d row(s)", book_id, affected)
    return affected


def list_book_reviews(conn: Connection) -> Iterator[Dict[str, Any]]:
    """Books joined with their reviews; single pass, books without reviews are left out."""
    return review_repo.iter_book_reviews(conn)


def format_book_review(row: Dict[str, Any]) -> str:
    return f'{row["title"]} by {row["author"]} - Review by {row["reviewer_name"]}: "{row["review_text"]}"'


def export_book_reviews(rows: Iterable[Dict[str, Any]], export_dir: str) -> str:
    os.makedirs(export_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(export_dir, f"book_reviews_{stamp}.csv")
    df = pd.DataFrame(list(rows), columns=EXPORT_COLUMNS)
    df.to_csv(path, index=False, encoding="utf-8-sig")
    logger.info("exported %d rows to %s", len(df), path)
    return path
