import json
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from library import Library
import main
from main import app

runner = CliRunner()

def invoke(data_file, *args, **kwargs):
    return runner.invoke(app, ["--data-file", data_file, *args], **kwargs)

def test_add_member(data_file):
    result = invoke(data_file, "add-member", "Alice")
    assert result.exit_code == 0
    assert "Member 'Alice' added successfully." in result.stdout
    assert Library(data_file=data_file).find_member("Alice") is not None

def test_borrow_book(data_file):
    invoke(data_file, "add-member", "Alice")
    result = invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days", "14")
    assert result.exit_code == 0
    assert "Book 'Dune' by 'Herbert' borrowed successfully." in result.stdout

    book = Library(data_file=data_file).find_member("Alice").borrowed_books[0]
    assert book.due_date == date.today() + timedelta(days=14)

def test_borrow_member_not_found(data_file):
    result = invoke(data_file, "borrow", "Ghost", "Dune", "Herbert")
    assert result.exit_code == 1
    assert "Member not found." in result.stdout

def test_borrow_invalid_loan_period(data_file):
    invoke(data_file, "add-member", "Alice")
    result = invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days", "two weeks")
    assert result.exit_code == 1
    assert "Invalid loan period" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books == []

@pytest.mark.parametrize("days", ["3000000", "-800000"])
def test_borrow_out_of_range_loan_period(data_file, days):
    invoke(data_file, "add-member", "Alice")
    result = invoke(data_file, "borrow", "Alice", "Dune", "Herbert", f"--days={days}")
    assert result.exit_code == 1
    assert "out of range" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books == []

def test_add_member_keeps_unreadable_data_file(data_file):
    payload = json.dumps([
        {"name": "Alice", "borrowed_books": [{"title": "Dune", "author": "Herbert", "overdue_fine": -1}]},
        {"name": "Bob", "borrowed_books": []},
    ])
    with open(data_file, "w", encoding="utf-8") as f:
        f.write(payload)

    result = invoke(data_file, "add-member", "Carol")
    assert result.exit_code == 0
    with open(f"{data_file}.corrupt", encoding="utf-8") as f:
        assert f.read() == payload
    assert [m.name for m in Library(data_file=data_file).list_members()] == ["Carol"]

def test_fines_refreshes_before_printing(data_file):
    invoke(data_file, "add-member", "Alice")
    invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days=-5")

    result = invoke(data_file, "fines")
    assert result.exit_code == 0
    assert "Book: Dune, Fine: $2.50" in result.stdout
    assert "Total Fine: $2.50" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books[0].overdue_fine == 2.5

def test_due_dates_json_output(data_file):
    invoke(data_file, "add-member", "Alice")
    invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days", "0")

    result = invoke(data_file, "--output", "json", "due-dates")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == [{
        "name": "Alice",
        "books": [{"title": "Dune", "author": "Herbert", "due_date": date.today().isoformat()}],
    }]

def test_due_dates_empty(data_file):
    result = invoke(data_file, "due-dates")
    assert result.exit_code == 0
    assert "No members in library." in result.stdout

def test_notify(data_file):
    invoke(data_file, "add-member", "Alice")
    invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days", "0")

    result = invoke(data_file, "notify")
    assert result.exit_code == 0
    assert "Notification sent to Alice for book 'Dune'" in result.stdout

def test_notify_nothing_due(data_file):
    result = invoke(data_file, "notify")
    assert result.exit_code == 0
    assert "No books due today." in result.stdout

def test_stats(data_file):
    invoke(data_file, "add-member", "Alice")
    invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days=-2")

    result = invoke(data_file, "stats")
    assert result.exit_code == 0
    assert "Members: 1" in result.stdout
    assert "Overdue Books: 1" in result.stdout
    assert "Outstanding Fines: $1.00" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books[0].overdue_fine == 1.0

def test_unknown_output_mode(data_file):
    result = invoke(data_file, "--output", "xml", "stats")
    assert result.exit_code == 2
    assert "Unknown output mode" in result.stdout

# --- Interactive menu ---

def test_menu_add_borrow_and_exit_persists(data_file):
    keys = "1\nAlice\n2\nAlice\nDune\nHerbert\n14\n6\n"
    result = invoke(data_file, "menu", input=keys)

    assert result.exit_code == 0
    assert "Member 'Alice' added successfully." in result.stdout
    assert "borrowed successfully" in result.stdout
    assert "Goodbye!" in result.stdout

    member = Library(data_file=data_file).find_member("Alice")
    assert [b.title for b in member.borrowed_books] == ["Dune"]

def test_menu_is_default_command(data_file):
    result = invoke(data_file, input="1\nBob\n6\n")
    assert result.exit_code == 0
    assert Library(data_file=data_file).find_member("Bob") is not None

def test_menu_member_not_found(data_file):
    result = invoke(data_file, "menu", input="2\nGhost\n6\n")
    assert result.exit_code == 0
    assert "Member not found." in result.stdout

def test_menu_bad_loan_period_is_reported(data_file):
    result = invoke(data_file, "menu", input="1\nAlice\n2\nAlice\nDune\nHerbert\nabc\n6\n")
    assert result.exit_code == 0
    assert "Invalid loan period" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books == []

def test_menu_out_of_range_loan_period_is_reported(data_file):
    result = invoke(data_file, "menu", input="1\nAlice\n2\nAlice\nDune\nHerbert\n3000000\n6\n")
    assert result.exit_code == 0
    assert "out of range" in result.stdout
    assert "Goodbye!" in result.stdout
    assert Library(data_file=data_file).find_member("Alice").borrowed_books == []

def test_menu_invalid_choice(data_file):
    result = invoke(data_file, "menu", input="9\n6\n")
    assert "Invalid input. Please try again." in result.stdout

@pytest.mark.parametrize("choice,expected", [
    ("1", "Notifications enabled."),
    ("2", "Notifications disabled."),
    ("x", "Invalid input."),
])
def test_menu_manage_notifications(data_file, choice, expected):
    result = invoke(data_file, "menu", input=f"5\n{choice}\n6\n")
    assert result.exit_code == 0
    assert expected in result.stdout

def test_menu_view_fines_and_due_dates(data_file):
    lib = Library(data_file=data_file)
    lib.add_member("Alice")
    lib.borrow_book("Alice", "Dune", "Herbert", 3, today=date(2024, 1, 1))
    lib.save()

    result = invoke(data_file, "menu", input="3\n4\n6\n")
    assert result.exit_code == 0
    assert "Book: Dune, Due Date: 2024-01-04" in result.stdout
    assert "Overdue Fines:" in result.stdout

def test_menu_end_of_input_exits_and_saves(data_file):
    result = invoke(data_file, "menu", input="1\nCarol\n")
    assert result.exit_code == 0
    assert Library(data_file=data_file).find_member("Carol") is not None

def test_fines_rich_output(data_file):
    invoke(data_file, "add-member", "Alice")
    invoke(data_file, "borrow", "Alice", "Dune", "Herbert", "--days=-1")

    result = invoke(data_file, "-o", "rich", "fines")
    assert result.exit_code == 0
    assert "Overdue Fines" in result.stdout
    assert "$0.50" in result.stdout

@pytest.mark.parametrize("keys", ["6\n", ""])
def test_menu_stops_background_tasks_on_exit(data_file, monkeypatch, keys):
    created = []

    class TrackedScheduler(main.BackgroundScheduler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(main, "BackgroundScheduler", TrackedScheduler)

    result = invoke(data_file, "menu", input=keys)
    assert result.exit_code == 0
    assert len(created) == 1
    assert not created[0].is_running
