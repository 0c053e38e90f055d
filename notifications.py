import logging
import threading
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from book import Book
from member import Member

logger = logging.getLogger(__name__)

# Any callable taking (member, book) can act as a notification sink
NotificationSink = Callable[[Member, Book], None]


class NotificationService:
    """Reports due-today books to their members on the console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.sent_count = 0
        self._lock = threading.Lock()

    def send_notification(self, member: Member, book: Book) -> None:
        message = (
            f"Notification sent to {member.name} for book '{book.title}' "
            f"due on {book.due_date}"
        )
        self.console.print(escape(message), soft_wrap=True)
        with self._lock:
            self.sent_count += 1
        logger.info(f"Due-date notification: member={member.name}, title={book.title}")

    __call__ = send_notification
