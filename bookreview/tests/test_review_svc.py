"""
Record operations: insert/list/delete/update on Books and Reviews.
"""
import logging
import sqlite3

import pandas as pd
import pytest

from bookreview.repository import book_repo, review_repo
from bookreview.services import review_svc
from bookreview.services.review_svc import GeneratedKeyError


def _rows(conn):
    return list(review_svc.list_book_reviews(conn))


def _count(conn, table):
    return conn.execute(f"SELECT COUNT(1) AS c FROM {table}").fetchone()["c"]


@pytest.mark.parametrize(
    "title,author,text,name",
    [
        ("Dune", "Herbert", "Great read", "Alice"),
        ("O'Brien's \"Notes\"", "Flann", "It's ok", "Bob"),
        ("Robert'); DROP TABLE Books;--", "Bobby", "x' OR '1'='1", "Mallory"),
        ("Der Zauberberg", "Thomas Mann", "Lang, aber großartig", "Jürgen"),
    ],
)
def test_insert_then_list_has_exactly_one_match(conn, title, author, text, name):
    review_svc.insert_book_with_review(conn, "Emma", "Austen", "Witty", "Carol")
    book_id = review_svc.insert_book_with_review(conn, title, author, text, name)

    assert book_id == 2
    expected = {"title": title, "author": author, "review_text": text, "reviewer_name": name}
    rows = _rows(conn)
    assert rows.count(expected) == 1
    assert _count(conn, "Books") == 2


def test_insert_logs_ids_only(conn, caplog):
    caplog.set_level(logging.INFO, logger="bookreview.services.review_svc")
    book_id = review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")

    assert f"inserted book {book_id} with review 1" in caplog.text
    assert "Great read" not in caplog.text
    assert "Alice" not in caplog.text


def test_list_is_single_pass(conn):
    review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
    it = review_svc.list_book_reviews(conn)
    assert len(list(it)) == 1
    assert list(it) == []


def test_list_excludes_books_without_reviews(conn):
    review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
    book_repo.insert_book(conn, "Lonely Book", "Nobody")

    titles = [r["title"] for r in _rows(conn)]
    assert titles == ["Dune"]
    assert _count(conn, "Books") == 2


def test_list_repeats_book_per_review(conn):
    book_id = review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
    review_repo.insert_review(conn, book_id, "Too long", "Bob")

    rows = _rows(conn)
    assert len(rows) == 2
    assert {r["reviewer_name"] for r in rows} == {"Alice", "Bob"}


class TestDeleteReview:

    def test_missing_id_returns_zero_and_keeps_rows(self, conn):
        review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
        before = _rows(conn)

        assert review_svc.delete_review(conn, 42) == 0
        assert _rows(conn) == before

    def test_existing_id_returns_one(self, conn):
        review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")

        assert review_svc.delete_review(conn, 1) == 1
        assert review_repo.get_one(conn, 1) is None
        # the book stays, but the join no longer shows it
        assert _count(conn, "Books") == 1
        assert _rows(conn) == []


class TestUpdateBook:

    def test_existing_book_changes_and_keeps_linkage(self, conn):
        book_id = review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")

        assert review_svc.update_book(conn, book_id, "Dune Messiah", "Frank Herbert") == 1

        reviews = review_repo.list_for_book(conn, book_id)
        assert [r["review_id"] for r in reviews] == [1]
        assert _rows(conn) == [
            {"title": "Dune Messiah", "author": "Frank Herbert", "review_text": "Great read", "reviewer_name": "Alice"}
        ]

    def test_missing_book_returns_zero(self, conn):
        assert review_svc.update_book(conn, 7, "X", "Y") == 0
        assert _count(conn, "Books") == 0

    def test_constraint_violation_raises(self, conn):
        book_id = review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
        with pytest.raises(sqlite3.IntegrityError):
            review_svc.update_book(conn, book_id, "", "Herbert")
        assert book_repo.get_one(conn, book_id)["title"] == "Dune"


class TestGeneratedKeyFailure:

    @pytest.fixture()
    def no_key(self, monkeypatch):
        real_insert = book_repo.insert_book

        def _insert_without_key(conn, title, author):
            real_insert(conn, title, author)
            return None

        monkeypatch.setattr(book_repo, "insert_book", _insert_without_key)

    def test_non_atomic_leaves_orphan_book(self, conn, no_key):
        with pytest.raises(GeneratedKeyError):
            review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice")
        assert _count(conn, "Books") == 1
        assert _count(conn, "Reviews") == 0

    def test_atomic_rolls_back_book(self, conn, no_key):
        with pytest.raises(GeneratedKeyError):
            review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice", atomic=True)
        assert _count(conn, "Books") == 0
        assert not conn.in_transaction


class TestReviewInsertFailure:

    def test_non_atomic_keeps_book(self, conn):
        with pytest.raises(sqlite3.IntegrityError):
            review_svc.insert_book_with_review(conn, "Dune", "Herbert", "x" * 1001, "Alice")
        assert _count(conn, "Books") == 1

    def test_atomic_discards_book(self, conn):
        with pytest.raises(sqlite3.IntegrityError):
            review_svc.insert_book_with_review(conn, "Dune", "Herbert", "x" * 1001, "Alice", atomic=True)
        assert _count(conn, "Books") == 0

    def test_atomic_success_commits(self, conn):
        review_svc.insert_book_with_review(conn, "Dune", "Herbert", "Great read", "Alice", atomic=True)
        assert not conn.in_transaction
        assert len(_rows(conn)) == 1


def test_format_book_review():
    row = {"title": "Dune", "author": "Herbert", "review_text": "Great read", "reviewer_name": "Alice"}
    assert review_svc.format_book_review(row) == 'Dune by Herbert - Review by Alice: "Great read"'


def test_export_book_reviews(tmp_path):
    rows = [
        {"title": "Dune", "author": "Herbert", "review_text": "Great read", "reviewer_name": "Alice"},
        {"title": "Emma", "author": "Austen", "review_text": "Witty", "reviewer_name": "Carol"},
    ]
    path = review_svc.export_book_reviews(rows, str(tmp_path / "exports"))

    df = pd.read_csv(path, encoding="utf-8-sig")
    assert list(df.columns) == review_svc.EXPORT_COLUMNS
    assert df["title"].tolist() == ["Dune", "Emma"]


def test_export_with_no_rows_writes_header_only(tmp_path):
    path = review_svc.export_book_reviews([], str(tmp_path))
    df = pd.read_csv(path, encoding="utf-8-sig")
    assert df.empty
    assert list(df.columns) == review_svc.EXPORT_COLUMNS
