import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import settings
from library import Library, MemberNotFoundError
from notifications import NotificationService
from scheduler import BackgroundScheduler, run_due_notifications, run_fine_refresh
from utils.ui_helpers import (
    print_due_dates,
    print_fines,
    print_stats_result,
    set_output_mode,
)
from utils.validators import LoanPeriodValidator

APP_NAME = settings.app_name

console = Console()
logger = logging.getLogger(__name__)

# Data file chosen by --data-file; None means database.DATA_FILE
_data_file: Optional[str] = None


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        filename=settings.log_file,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )


def get_library() -> Library:
    return Library(data_file=_data_file)


# --- Typer CLI ---
app = typer.Typer(help="Library member, due date and fine tracker")

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_file: Optional[str] = typer.Option(
        None,
        "--data-file",
        help="Library data file (default: library_data.json)",
    ),
):
    """Global options; starts the interactive menu when no command is given."""
    global _data_file
    configure_logging()
    if output:
        try:
            set_output_mode(output)
        except ValueError as e:
            print(f"Error: {e}")
            raise typer.Exit(code=2)
    _data_file = data_file
    if ctx.invoked_subcommand is None:
        run_menu()

@app.command("menu")
def cli_menu():
    """Start the interactive menu with background fine and notification tasks."""
    run_menu()

@app.command("add-member")
def cli_add_member(name: str):
    """Add a member."""
    lib = get_library()
    try:
        member = lib.add_member(name)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    lib.save()
    print(f"Member '{member.name}' added successfully.")

@app.command("borrow")
def cli_borrow(
    name: str = typer.Argument(..., help="Member name"),
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Book author"),
    days: str = typer.Option("14", "--days", "-d", help="Loan period in days"),
):
    """Lend a book to a member."""
    lib = get_library()
    try:
        loan_period = LoanPeriodValidator.parse_loan_period(days)
        book = lib.borrow_book(name, title, author, loan_period)
    except MemberNotFoundError:
        print("Member not found.")
        raise typer.Exit(code=1)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    lib.save()
    print(f"Book '{book.title}' by '{book.author}' borrowed successfully. Due on {book.due_date}.")

@app.command("due-dates")
def cli_due_dates():
    """Show due dates for every member."""
    print_due_dates(get_library().list_members())

@app.command("fines")
def cli_fines():
    """Recompute and show overdue fines."""
    lib = get_library()
    run_fine_refresh(lib)
    lib.save()
    print_fines(lib.list_members())

@app.command("notify")
def cli_notify():
    """Send notifications for books due today."""
    lib = get_library()
    sent = run_due_notifications(lib, NotificationService(console))
    if not sent:
        print("No books due today.")

@app.command("stats")
def cli_stats():
    """Show library statistics."""
    lib = get_library()
    run_fine_refresh(lib)
    lib.save()
    print_stats_result(lib.get_statistics())

# --- Interactive menu ---
def add_member(lib: Library) -> None:
    name = Prompt.ask("Enter member name", console=console)
    try:
        member = lib.add_member(name)
    except ValueError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(f"[green]Member '{escape(member.name)}' added successfully.[/]")

def borrow_book(lib: Library) -> None:
    name = Prompt.ask("Enter member name", console=console)
    member = lib.find_member(name)
    if member is None:
        console.print("[yellow]Member not found.[/]")
        return
    title = Prompt.ask("Enter book title", console=console)
    author = Prompt.ask("Enter book author", console=console)
    raw_period = Prompt.ask("Enter loan period (in days)", console=console)
    try:
        loan_period = LoanPeriodValidator.parse_loan_period(raw_period)
        book = lib.borrow_book(member.name, title, author, loan_period)
    except ValueError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print(
        f"[green]Book '{escape(book.title)}' by '{escape(book.author)}' borrowed successfully.[/] "
        f"Due on {book.due_date}.",
        soft_wrap=True,
    )

def check_due_dates(lib: Library) -> None:
    print_due_dates(lib.list_members())

def view_fines(lib: Library) -> None:
    print_fines(lib.list_members())

def manage_notifications() -> None:
    """Enable/disable prompt. The choice is reported only; the scheduler keeps running."""
    console.print("Manage Notifications:")
    console.print("1. Enable Notifications")
    console.print("2. Disable Notifications")
    choice = Prompt.ask("Enter your choice", console=console).strip()
    if choice == "1":
        logger.info("Notifications enable requested")
        console.print("Notifications enabled.")
    elif choice == "2":
        logger.info("Notifications disable requested")
        console.print("Notifications disabled.")
    else:
        console.print("[yellow]Invalid input.[/]")

def render_menu() -> None:
    menu_items = [
        ("1", "Add Member", "👤"),
        ("2", "Borrow Book", "📖"),
        ("3", "Check Due Dates", "📅"),
        ("4", "View Fines", "💰"),
        ("5", "Manage Notifications", "🔔"),
        ("6", "Exit", "🚪"),
    ]

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in menu_items:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

    console.print(Panel(
        table,
        title=APP_NAME,
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    ))

def run_menu() -> None:
    """Interactive menu; the background tasks run until the user exits."""
    lib = get_library()
    scheduler = BackgroundScheduler(lib, NotificationService(console))
    scheduler.start()
    try:
        while True:
            render_menu()
            choice = Prompt.ask("Enter your choice", console=console).strip()

            if choice == "1":
                add_member(lib)
            elif choice == "2":
                borrow_book(lib)
            elif choice == "3":
                check_due_dates(lib)
            elif choice == "4":
                view_fines(lib)
            elif choice == "5":
                manage_notifications()
            elif choice == "6":
                break
            else:
                console.print("[yellow]Invalid input. Please try again.[/]")
            print()
    except (EOFError, KeyboardInterrupt):
        # End of input behaves like Exit
        console.print()
    finally:
        scheduler.stop()
        if lib.save():
            console.print(f"[dim]Library data saved to {escape(lib.data_file)}[/]", soft_wrap=True)
        else:
            console.print("[bold red]Library data could not be saved.[/]")
    console.print("[green]Goodbye![/]")

if __name__ == "__main__":
    app()
