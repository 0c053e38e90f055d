"""
Background tasks that keep fines current and send due-date notifications.

Two ``RepeatingTask`` threads share one cancellation event:
- fine refresh: every ``fine_interval`` seconds, recompute every book's fine
- due-today scan: every ``notification_interval`` seconds, notify members
  whose books are due exactly today

Each task does its work first and then waits, so both run once as soon as
they start.
"""

import logging
import threading
from datetime import date
from typing import Callable, List, Optional, Tuple

from book import Book
from config import settings
from library import Library
from member import Member
from notifications import NotificationService, NotificationSink

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def run_fine_refresh(library: Library, today: Optional[date] = None) -> int:
    """One pass of the fine-refresh task."""
    count = library.refresh_fines(today or date.today())
    logger.info(f"Overdue fines updated ({count} books)")
    return count


def run_due_notifications(library: Library, notifier: NotificationSink,
                          today: Optional[date] = None) -> List[Tuple[Member, Book]]:
    """One pass of the due-today scan. Returns the (member, book) pairs notified."""
    due = library.books_due_on(today or date.today())
    # Sink is called outside the library lock
    for member, book in due:
        notifier(member, book)
    logger.info(f"Due-date scan finished ({len(due)} notifications)")
    return due


class RepeatingTask:
    """Runs ``action`` in a daemon thread every ``interval`` seconds until stopped."""

    def __init__(self, name: str, interval: float, action: Callable[[], object],
                 stop_event: threading.Event) -> None:
        if interval <= 0:
            raise ValueError(f"Interval for {name} must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self.action = action
        self.stop_event = stop_event
        self.runs = 0
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        logger.debug(f"{self.name} started (interval={self.interval}s)")
        while not self.stop_event.is_set():
            try:
                self.action()
            except Exception:
                logger.exception(f"{self.name} iteration failed")
            self.runs += 1
            if self.stop_event.wait(self.interval):
                break
        logger.debug(f"{self.name} stopped after {self.runs} runs")

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class BackgroundScheduler:
    """Starts and cancels the fine-refresh and due-today tasks for a library."""

    def __init__(
        self,
        library: Library,
        notifier: Optional[NotificationSink] = None,
        fine_interval: Optional[float] = None,
        notification_interval: Optional[float] = None,
        clock: Clock = date.today,
    ) -> None:
        self.library = library
        self.notifier = notifier or NotificationService()
        self.clock = clock
        self._stop_event = threading.Event()
        self.fine_task = RepeatingTask(
            "fine-refresh",
            settings.fine_refresh_interval if fine_interval is None else fine_interval,
            lambda: run_fine_refresh(self.library, self.clock()),
            self._stop_event,
        )
        self.notification_task = RepeatingTask(
            "due-notifications",
            settings.notification_interval if notification_interval is None else notification_interval,
            lambda: run_due_notifications(self.library, self.notifier, self.clock()),
            self._stop_event,
        )
        self._started = False

    @property
    def is_running(self) -> bool:
        return self.fine_task.is_alive() or self.notification_task.is_alive()

    def start(self) -> None:
        if self._started:
            raise RuntimeError("Scheduler already started")
        self._started = True
        self.fine_task.start()
        self.notification_task.start()
        logger.info("Background scheduler started")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        self.fine_task.join(timeout)
        self.notification_task.join(timeout)
        logger.info("Background scheduler stopped")

    def __enter__(self) -> "BackgroundScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
