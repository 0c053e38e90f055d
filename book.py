from __future__ import annotations

from datetime import date, timedelta


class Book:
    """A single borrowed book, owned by the member who borrowed it."""

    def __init__(self, title: str, author: str, due_date: date | None = None,
                 overdue_fine: float = 0.0) -> None:
        self.title = title.strip()
        self.author = author.strip()
        self.due_date = due_date
        self.overdue_fine = overdue_fine

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (due {self.due_date})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def set_due_date(self, loan_period: int, today: date | None = None) -> date:
        """Set the due date once, ``loan_period`` days after ``today``."""
        if self.due_date is not None:
            raise ValueError(f"Due date for '{self.title}' is already set.")
        try:
            self.due_date = (today or date.today()) + timedelta(days=loan_period)
        except OverflowError as e:
            raise ValueError(f"Loan period {loan_period} is out of range.") from e
        return self.due_date

    def is_due_on(self, day: date) -> bool:
        return self.due_date is not None and self.due_date == day

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "overdue_fine": self.overdue_fine,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        due = data.get("due_date")
        if isinstance(due, str):
            due = date.fromisoformat(due)
        return Book(
            title=data["title"],
            author=data["author"],
            due_date=due,
            overdue_fine=float(data.get("overdue_fine") or 0.0),
        )
