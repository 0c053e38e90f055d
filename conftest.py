import io
import pytest
from rich.console import Console

from library import Library
from notifications import NotificationService
from utils.ui_helpers import OUTPUT_MODE_ENV

@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # --output sets an environment variable; keep tests isolated from each other
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")

@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "library_data.json")

@pytest.fixture
def lib(data_file):
    # Each test gets its own data file
    return Library(data_file=data_file)

@pytest.fixture
def notifier():
    return NotificationService(console=Console(file=io.StringIO(), width=200))
