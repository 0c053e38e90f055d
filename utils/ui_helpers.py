import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    else:
        raise ValueError(f"Unknown output mode {mode!r}: use plain, json or rich.")

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()

def _money(amount: float) -> str:
    return f"${amount:.2f}"

def print_due_dates(members: List[Any]) -> None:
    """Print each member's books that have a due date.
    - plain: 'Member: name' then 'Book: title, Due Date: YYYY-MM-DD' lines
    - json: array of {name, books: [{title, author, due_date}]}
    - rich: one table row per book
    """
    mode = get_output_mode()

    if not members:
        print("No members in library.")
        return

    if mode == "json":
        payload = [
            {
                "name": m.name,
                "books": [
                    {"title": b.title, "author": b.author, "due_date": b.due_date.isoformat()}
                    for b in m.borrowed_books if b.due_date is not None
                ],
            }
            for m in members
        ]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📅 Due Dates", show_lines=True, header_style="bold cyan")
        table.add_column("Member", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Due Date", style="yellow")
        for m in members:
            for b in m.borrowed_books:
                if b.due_date is not None:
                    table.add_row(escape(m.name), escape(b.title), escape(b.author), b.due_date.isoformat())
        _console.print(table)
    else:
        print("Due Dates:")
        for m in members:
            print(f"Member: {m.name}")
            for b in m.borrowed_books:
                if b.due_date is not None:
                    print(f"Book: {b.title}, Due Date: {b.due_date.isoformat()}")
            print()

def print_fines(members: List[Any]) -> None:
    """Print the fine of every borrowed book and each member's total."""
    mode = get_output_mode()

    if not members:
        print("No members in library.")
        return

    if mode == "json":
        payload = [
            {
                "name": m.name,
                "books": [{"title": b.title, "fine": b.overdue_fine} for b in m.borrowed_books],
                "total_fine": m.total_fine,
            }
            for m in members
        ]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="💰 Overdue Fines", show_lines=True, header_style="bold cyan")
        table.add_column("Member", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Fine", style="red", justify="right")
        for m in members:
            for b in m.borrowed_books:
                table.add_row(escape(m.name), escape(b.title), _money(b.overdue_fine))
            table.add_row(f"[bold]{escape(m.name)}[/]", "[bold]Total[/]", f"[bold]{_money(m.total_fine)}[/]")
        _console.print(table)
    else:
        print("Overdue Fines:")
        for m in members:
            print(f"Member: {m.name}")
            for b in m.borrowed_books:
                print(f"Book: {b.title}, Fine: {_money(b.overdue_fine)}")
            print(f"Total Fine: {_money(m.total_fine)}")
            print()

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print library statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Members:[/] {stats['total_members']}\n"
            f"[bold]Borrowed Books:[/] {stats['borrowed_books']}\n"
            f"[bold]Overdue Books:[/] {stats['overdue_books']}\n"
            f"[bold]Outstanding Fines:[/] {_money(stats['total_fines'])}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Members: {stats['total_members']}")
        print(f"Borrowed Books: {stats['borrowed_books']}")
        print(f"Overdue Books: {stats['overdue_books']}")
        print(f"Outstanding Fines: {_money(stats['total_fines'])}")
