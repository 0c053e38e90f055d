import logging
import threading
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import database
from book import Book
from fines import calculate_overdue_fine
from member import Member
from utils.validators import TextValidator

logger = logging.getLogger(__name__)


class MemberNotFoundError(LookupError):
    pass


class Library:
    """Owns every member and borrowed book, plus their persistence.

    All reads and writes go through ``self._lock`` so the shell and the
    background tasks never see a half-updated member list.
    """

    def __init__(self, data_file: Optional[str] = None) -> None:
        self.data_file = data_file or database.DATA_FILE
        self._lock = threading.RLock()
        self.members: List[Member] = []
        self.load()

    # ------------------------- Core operations ------------------------- #
    def add_member(self, name: str) -> Member:
        """Append a new member. Duplicate names are allowed; lookups return the first."""
        if not TextValidator.validate_name(name):
            raise ValueError("Member name cannot be empty.")
        member = Member(name)
        with self._lock:
            self.members.append(member)
        logger.info(f"Member added: {member.name}")
        return member

    def find_member(self, name: str) -> Optional[Member]:
        name = (name or "").strip()
        with self._lock:
            for member in self.members:
                if member.name == name:
                    return member
        return None

    def get_member(self, name: str) -> Member:
        member = self.find_member(name)
        if member is None:
            raise MemberNotFoundError(f"Member '{name}' not found.")
        return member

    def borrow_book(self, member_name: str, title: str, author: str, loan_period: int,
                    today: Optional[date] = None) -> Book:
        """Lend a new book to ``member_name`` due ``loan_period`` days from ``today``."""
        if not TextValidator.validate_title(title):
            raise ValueError("Book title cannot be empty.")
        if not TextValidator.validate_author(author):
            raise ValueError("Book author cannot be empty.")
        with self._lock:
            member = self.get_member(member_name)
            book = member.borrow_book(Book(title, author), loan_period, today)
        logger.info(f"Book borrowed: member={member.name}, title={book.title}, due={book.due_date}")
        return book

    def list_members(self) -> List[Member]:
        with self._lock:
            return list(self.members)

    def total_fine(self, member: Member) -> float:
        with self._lock:
            return member.total_fine

    # ------------------------- Scans ------------------------- #
    def refresh_fines(self, today: Optional[date] = None) -> int:
        """Recompute every book's fine as of ``today``. Returns books visited."""
        today = today or date.today()
        count = 0
        with self._lock:
            for member in self.members:
                for book in member.borrowed_books:
                    book.overdue_fine = calculate_overdue_fine(book.due_date, today)
                    count += 1
        return count

    def books_due_on(self, day: date) -> List[Tuple[Member, Book]]:
        """Every (member, book) whose due date is exactly ``day``."""
        with self._lock:
            return [
                (member, book)
                for member in self.members
                for book in member.borrowed_books
                if book.is_due_on(day)
            ]

    def get_statistics(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        with self._lock:
            books = [book for member in self.members for book in member.borrowed_books]
            return {
                "total_members": len(self.members),
                "borrowed_books": len(books),
                "overdue_books": sum(1 for b in books if b.due_date is not None and today > b.due_date),
                "total_fines": sum(b.overdue_fine for b in books),
            }

    # ------------------------- Persistence ------------------------- #
    def load(self) -> None:
        members = database.load_members(self.data_file)
        with self._lock:
            self.members = members

    def save(self) -> bool:
        with self._lock:
            return database.save_members(self.members, self.data_file)
