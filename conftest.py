import pytest

from config import settings
from library import Library


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    # Keep --output from one CLI test leaking into the next
    monkeypatch.delenv("LIB_CLI_OUTPUT", raising=False)
    monkeypatch.setattr(settings, "enforce_single_holder", False)


@pytest.fixture
def snapshot_files(tmp_path):
    """Per-test book and visitor snapshot paths (files not created yet)."""
    return str(tmp_path / "books.json"), str(tmp_path / "visitors.json")


@pytest.fixture
def lib(snapshot_files):
    books_file, visitors_file = snapshot_files
    return Library(books_file=books_file, visitors_file=visitors_file, enforce_single_holder=False)
