import json
import os
import subprocess
import sys

import pytest
from typer.testing import CliRunner

from main import app, LibraryManager, run_shell

runner = CliRunner()


@pytest.fixture
def invoke(snapshot_files):
    books_file, visitors_file = snapshot_files

    def _invoke(*args, input=None):
        return runner.invoke(
            app,
            ["--books-file", books_file, "--visitors-file", visitors_file, *args],
            input=input,
        )

    yield _invoke
    LibraryManager.configure()


def test_read_no_books(invoke):
    result = invoke("read")
    assert result.exit_code == 0
    assert "No books found." in result.stdout


def test_create_and_read(invoke):
    result = invoke("create", "Dune", "Herbert")
    assert result.exit_code == 0
    assert "Book created: ID: 1, Title: Dune, Author: Herbert" in result.stdout

    result = invoke("read")
    assert "ID: 1, Title: Dune, Author: Herbert" in result.stdout


def test_read_json_output(invoke):
    invoke("create", "Dune", "Herbert")
    result = invoke("--output", "json", "read")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"id": 1, "title": "Dune", "author": "Herbert"}]


def test_search_not_found(invoke):
    invoke("create", "Dune", "Herbert")
    result = invoke("search", "zzz")
    assert result.exit_code == 0
    assert "No books found matching your search." in result.stdout


def test_search_matches(invoke):
    invoke("create", "Dune", "Herbert")
    invoke("create", "Dune Messiah", "Herbert")
    result = invoke("search", "DUN")
    assert "Title: Dune," in result.stdout
    assert "Title: Dune Messiah" in result.stdout


def test_update_and_delete(invoke):
    invoke("create", "Old", "Author")
    result = invoke("update", "1", "New", "Writer")
    assert "Book updated: ID: 1, Title: New, Author: Writer" in result.stdout

    result = invoke("delete", "1")
    assert "Book deleted: 1" in result.stdout
    assert "No books found." in invoke("read").stdout


def test_delete_not_found_writes_nothing(invoke, snapshot_files):
    result = invoke("delete", "1")
    assert result.exit_code == 0
    assert "Book not found: 1" in result.stdout
    assert not os.path.exists(snapshot_files[0])


def test_rent_flow(invoke):
    invoke("create", "Dune", "Herbert")
    result = invoke("add-visitor", "Alice")
    assert "Visitor added: ID: 1, Name: Alice" in result.stdout

    assert "Book rented." in invoke("rent", "1", "1").stdout
    assert "Visitor already rented this book." in invoke("rent", "1", "1").stdout
    assert "ID: 1, Name: Alice, Renting: Book ID(s) 1" in invoke("visitors").stdout

    assert "Book returned." in invoke("return", "1", "1").stdout
    result = invoke("return", "1", "1")
    assert result.exit_code == 0
    assert "This book is not currently rented by the visitor." in result.stdout
    assert "Renting: none" in invoke("visitors").stdout


def test_rent_unknown_visitor(invoke):
    result = invoke("rent", "5", "1")
    assert result.exit_code == 0
    assert "Visitor not found: 5" in result.stdout


def test_delete_reports_remaining_holders(invoke):
    invoke("create", "Dune", "Herbert")
    invoke("add-visitor", "Alice")
    invoke("rent", "1", "1")
    result = invoke("delete", "1")
    assert "Still listed as rented by visitor(s): 1" in result.stdout


def test_stats(invoke):
    invoke("create", "Dune", "Herbert")
    result = invoke("stats")
    assert "Total Books: 1" in result.stdout
    assert "Active Rentals: 0" in result.stdout


def test_shell_session(invoke):
    session = "\n".join([
        "create", "Dune", "Herbert",
        "  addvisitor ", "Alice",
        "RENT", "1", "1",
        "VISITORS", "x", "",
        "RETURN", "1", "1", "",
        "READ", "",
        "EXIT",
    ]) + "\n"
    result = invoke("shell", input=session)
    assert result.exit_code == 0
    out = result.stdout
    assert "Book created: ID: 1, Title: Dune, Author: Herbert" in out
    assert "Visitor added: ID: 1, Name: Alice" in out
    assert "Book rented." in out
    assert "Renting: Book ID(s) 1" in out
    assert "Book returned." in out
    assert "Goodbye!" in out


def test_shell_is_default_and_stops_at_end_of_input(invoke):
    result = invoke(input="FOO\n")
    assert result.exit_code == 0
    assert "Unknown command." in result.stdout
    assert "Goodbye!" not in result.stdout


def test_shell_rejects_invalid_ids(invoke):
    result = invoke("shell", input="DELETE\nabc\nEXIT\n")
    assert "Invalid ID: 'abc'" in result.stdout
    assert "Goodbye!" in result.stdout


def test_shell_stops_at_unknown_visitor_before_book_prompt(lib, capsys):
    prompts = []
    answers = iter(["RENT", "3", "EXIT"])

    def read(prompt):
        prompts.append(prompt)
        return next(answers)

    run_shell(lib, read=read)
    assert "Book ID to rent: " not in prompts
    assert "Visitor not found: 3" in capsys.readouterr().out


def test_search_waits_until_empty_line(lib, capsys):
    lib.create_book("Dune", "Herbert")
    answers = iter(["search", "dune", "not yet", "again", "", "exit"])
    prompts = []

    def read(prompt):
        prompts.append(prompt)
        return next(answers)

    run_shell(lib, read=read)
    assert prompts.count("\npress Enter to return: ") == 3
    assert "ID: 1, Title: Dune, Author: Herbert" in capsys.readouterr().out


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _run_main(snapshot_files, *args, **env_overrides):
    books_file, visitors_file = snapshot_files
    env = dict(os.environ)
    env.pop("LIB_CLI_OUTPUT", None)
    env.update(env_overrides)
    return subprocess.run(
        [sys.executable, os.path.join(REPO_ROOT, "main.py"),
         "--books-file", books_file, "--visitors-file", visitors_file, *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        env=env,
    )


def test_json_output_is_not_mixed_with_log_records(snapshot_files):
    created = _run_main(snapshot_files, "create", "Dune", "Herbert", LOG_LEVEL="INFO")
    assert created.returncode == 0

    result = _run_main(snapshot_files, "--output", "json", "read", LOG_LEVEL="INFO")
    assert result.returncode == 0
    assert json.loads(result.stdout) == [{"id": 1, "title": "Dune", "author": "Herbert"}]
    assert "starting fresh" in result.stderr


def test_unknown_log_level_falls_back(snapshot_files):
    result = _run_main(snapshot_files, "read", LOG_LEVEL="verbose")
    assert result.returncode == 0
    assert "No books found." in result.stdout
