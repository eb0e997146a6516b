"""
Console controller: the numbered Insert/Delete/Update/View/Quit menu.

Reads one line per prompt from the input stream, dispatches to the review
services and prints the outcome. Statement errors and unparsable numbers
abort only the current operation; end of input ends the session.
"""
from __future__ import annotations

import logging
import re
import sqlite3
import sys
from enum import Enum, auto
from typing import Callable, Dict, Optional, TextIO

from .services import review_svc
from .services.config_svc import AppConfig

logger = logging.getLogger(__name__)

# Plain decimal integers only: optional sign, ASCII digits, no "_" separators.
_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str) -> int:
    s = text.strip()
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"Invalid number: {text!r}")
    return int(s)


class State(Enum):
    MENU_PROMPT = auto()
    AWAITING_INPUT = auto()
    DISPATCHING = auto()
    TERMINATED = auto()


class ConsoleController:
    MENU = "\nMenu:\n1) Insert\n2) Delete\n3) Update\n4) View\n5) Quit"
    QUIT = 5

    def __init__(self, conn: sqlite3.Connection, cfg: AppConfig, stdin: Optional[TextIO] = None):
        self.conn = conn
        self.cfg = cfg
        self.stdin = stdin if stdin is not None else sys.stdin
        self.state = State.MENU_PROMPT
        self.actions: Dict[int, Callable[[], None]] = {
            1: self.insert_record,
            2: self.delete_record,
            3: self.update_record,
            4: self.view_records,
        }

    # ---------------- input helpers ----------------

    def _read_line(self, prompt: str) -> str:
        print(prompt, end="", flush=True)
        line = self.stdin.readline()
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")

    def _read_int(self, prompt: str) -> int:
        return parse_int(self._read_line(prompt))

    # ---------------- loop ----------------

    def run(self) -> None:
        while self.state is not State.TERMINATED:
            self.step()

    def step(self) -> None:
        print(self.MENU)
        self.state = State.AWAITING_INPUT
        try:
            text = self._read_line("Choose an option: ")
        except EOFError:
            print()
            self.state = State.TERMINATED
            return

        try:
            choice = parse_int(text)
        except ValueError:
            choice = None
        if choice == self.QUIT:
            self.state = State.TERMINATED
            return
        action = self.actions.get(choice)
        if action is None:
            print("Invalid option. Please try again.")
            self.state = State.MENU_PROMPT
            return

        self.state = State.DISPATCHING
        try:
            action()
        except EOFError:
            print()
            self.state = State.TERMINATED
            return
        self.state = State.MENU_PROMPT

    def _guarded(self, action_name: str, fn: Callable[[], None]) -> None:
        try:
            fn()
        except (ValueError, OverflowError) as e:
            print(e)
        except review_svc.GeneratedKeyError:
            print("Failed to retrieve generated book ID.")
        except sqlite3.Error as e:
            logger.warning("%s failed: %s", action_name, e)
            print(f"Database error: {e}")
        except OSError as e:
            print(f"Export failed: {e}")

    # ---------------- operations ----------------

    def insert_record(self) -> None:
        title = self._read_line("Enter book title: ")
        author = self._read_line("Enter book author: ")
        review_text = self._read_line("Enter review text: ")
        reviewer_name = self._read_line("Enter reviewer's name: ")

        def _do():
            book_id = review_svc.insert_book_with_review(
                self.conn, title, author, review_text, reviewer_name,
                atomic=self.cfg.atomic_insert,
            )
            print(f"Book and review saved (book ID {book_id}).")

        self._guarded("insert", _do)

    def delete_record(self) -> None:
        def _do():
            review_id = self._read_int("Enter review ID to delete: ")
            if review_svc.delete_review(self.conn, review_id) == 0:
                print("No review found with the given ID.")
            else:
                print("Review deleted successfully.")

        self._guarded("delete", _do)

    def update_record(self) -> None:
        def _do():
            book_id = self._read_int("Enter book ID to update: ")
            new_title = self._read_line("Enter new title: ")
            new_author = self._read_line("Enter new author: ")
            if review_svc.update_book(self.conn, book_id, new_title, new_author) > 0:
                print("Book updated successfully.")
            else:
                print("No book found with the given ID.")

        self._guarded("update", _do)

    def view_records(self) -> None:
        def _do():
            print("\nBooks and Reviews:")
            shown = []
            for row in review_svc.list_book_reviews(self.conn):
                print(review_svc.format_book_review(row))
                shown.append(row)
            logger.info("view listed %d row(s)", len(shown))
            if self.cfg.export_dir:
                path = review_svc.export_book_reviews(shown, self.cfg.export_dir)
                print(f"CSV exported to {path}")

        self._guarded("view", _do)
