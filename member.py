from __future__ import annotations

from datetime import date
from typing import List

from book import Book


class Member:
    """A library member and the books they currently hold."""

    def __init__(self, name: str, borrowed_books: List[Book] | None = None) -> None:
        self.name = name.strip()
        self.borrowed_books: List[Book] = borrowed_books or []

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} ({len(self.borrowed_books)} books)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return self.name == other.name and self.borrowed_books == other.borrowed_books

    def borrow_book(self, book: Book, loan_period: int, today: date | None = None) -> Book:
        book.set_due_date(loan_period, today)
        self.borrowed_books.append(book)
        return book

    @property
    def total_fine(self) -> float:
        return sum(book.overdue_fine for book in self.borrowed_books)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "borrowed_books": [book.to_dict() for book in self.borrowed_books],
        }

    @staticmethod
    def from_dict(data: dict) -> "Member":
        return Member(
            name=data["name"],
            borrowed_books=[Book.from_dict(b) for b in data.get("borrowed_books") or []],
        )
