import logging
from functools import wraps
from typing import Callable, Dict, Optional, Tuple

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from book import Book
from config import settings
from errors import LibraryError
from library import Library
from utils.ui_helpers import (
    print_books,
    print_stats_result,
    print_visitors,
    set_output_mode,
    wait_for_return,
)
from utils.validators import IDValidator

APP_NAME = settings.app_name

console = Console()

Reader = Callable[[str], str]


def _configure_logging() -> None:
    # No-op when the root logger already has handlers (e.g. under pytest).
    # Log records go to stderr so stdout carries only command output.
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=settings.debug)],
    )


# Single Library instance shared by every command of a session
class LibraryManager:
    _instance: Optional[Library] = None
    _books_file: Optional[str] = None
    _visitors_file: Optional[str] = None

    @classmethod
    def configure(cls, books_file: Optional[str] = None, visitors_file: Optional[str] = None) -> None:
        """Point the manager at snapshot files; the next get_instance() reloads them."""
        cls._books_file = books_file
        cls._visitors_file = visitors_file
        cls._instance = None

    @classmethod
    def get_instance(cls) -> Library:
        if cls._instance is None:
            cls._instance = Library(books_file=cls._books_file, visitors_file=cls._visitors_file)
        return cls._instance


def reports_errors(func):
    """Print library errors as messages instead of letting them reach typer."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LibraryError as e:
            print(e)
    return wrapper


def _describe(book: Book) -> str:
    return f"ID: {book.id}, Title: {book.title}, Author: {book.author}"


# --- Operations shared by the subcommands and the interactive shell ---
def do_create(lib: Library, title: str, author: str) -> None:
    book = lib.create_book(title, author)
    print(f"Book created: {_describe(book)}")


def do_update(lib: Library, book_id: int, title: str, author: str) -> None:
    book = lib.update_book(book_id, title, author)
    print(f"Book updated: {_describe(book)}")


def do_delete(lib: Library, book_id: int) -> None:
    lib.remove_book(book_id)
    print(f"Book deleted: {book_id}")
    holders = lib.ledger.holders_of(book_id)
    if holders:
        print(f"Still listed as rented by visitor(s): {', '.join(str(v) for v in holders)}")


def do_search(lib: Library, query: str) -> None:
    print_books(lib.search_books(query), empty_message="No books found matching your search.")


def do_add_visitor(lib: Library, name: str) -> None:
    visitor = lib.ledger.add_visitor(name)
    print(f"Visitor added: ID: {visitor.id}, Name: {visitor.name}")


def do_rent(lib: Library, visitor_id: int, book_id: int) -> None:
    lib.ledger.rent(visitor_id, book_id)
    print("Book rented.")


def do_return(lib: Library, visitor_id: int, book_id: int) -> None:
    lib.ledger.return_book(visitor_id, book_id)
    print("Book returned.")


# --- Typer CLI ---
app = typer.Typer(help=APP_NAME)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    books_file: Optional[str] = typer.Option(None, "--books-file", help="Book snapshot file"),
    visitors_file: Optional[str] = typer.Option(None, "--visitors-file", help="Visitor snapshot file"),
):
    """Global options; starts the interactive shell when no command is given."""
    _configure_logging()
    if output:
        set_output_mode(output)
    LibraryManager.configure(books_file, visitors_file)
    if ctx.invoked_subcommand is None:
        run_shell(LibraryManager.get_instance())


@app.command("read")
def cli_read():
    """List all books."""
    print_books(LibraryManager.get_instance().list_books())


@app.command("search")
def cli_search(query: str = typer.Argument(..., help="Title keyword")):
    """Search book titles (case-insensitive)."""
    do_search(LibraryManager.get_instance(), query)


@app.command("create")
@reports_errors
def cli_create(title: str, author: str):
    """Add a book to the catalog."""
    do_create(LibraryManager.get_instance(), title, author)


@app.command("update")
@reports_errors
def cli_update(book_id: int, title: str, author: str):
    """Replace the title and author of a book."""
    do_update(LibraryManager.get_instance(), book_id, title, author)


@app.command("delete")
@reports_errors
def cli_delete(book_id: int):
    """Delete a book by ID."""
    do_delete(LibraryManager.get_instance(), book_id)


@app.command("visitors")
def cli_visitors():
    """List visitors and the books they are renting."""
    print_visitors(LibraryManager.get_instance().ledger.list_visitors())


@app.command("add-visitor")
@reports_errors
def cli_add_visitor(name: str):
    """Register a new visitor."""
    do_add_visitor(LibraryManager.get_instance(), name)


@app.command("rent")
@reports_errors
def cli_rent(visitor_id: int, book_id: int):
    """Rent a book to a visitor."""
    do_rent(LibraryManager.get_instance(), visitor_id, book_id)


@app.command("return")
@reports_errors
def cli_return(visitor_id: int, book_id: int):
    """Return a book a visitor is renting."""
    do_return(LibraryManager.get_instance(), visitor_id, book_id)


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())


@app.command("shell")
def cli_shell():
    """Start the interactive command loop."""
    run_shell(LibraryManager.get_instance())


# --- Interactive shell ---
def _ask_id(read: Reader, prompt: str) -> Optional[int]:
    try:
        return IDValidator.parse_id(read(prompt))
    except ValueError as e:
        print(e)
        return None


def _shell_visitors(lib: Library, read: Reader) -> None:
    print_visitors(lib.ledger.list_visitors())


def _shell_add_visitor(lib: Library, read: Reader) -> None:
    do_add_visitor(lib, read("Enter visitor name: "))


def _shell_rent(lib: Library, read: Reader) -> None:
    visitor_id = _ask_id(read, "Visitor ID: ")
    if visitor_id is None:
        return
    lib.ledger.get_visitor(visitor_id)
    book_id = _ask_id(read, "Book ID to rent: ")
    if book_id is not None:
        do_rent(lib, visitor_id, book_id)


def _shell_return(lib: Library, read: Reader) -> None:
    visitor_id = _ask_id(read, "Visitor ID: ")
    if visitor_id is None:
        return
    lib.ledger.get_visitor(visitor_id)
    book_id = _ask_id(read, "Book ID to return: ")
    if book_id is not None:
        do_return(lib, visitor_id, book_id)


def _shell_create(lib: Library, read: Reader) -> None:
    title = read("Enter title: ")
    author = read("Enter author: ")
    do_create(lib, title, author)


def _shell_read(lib: Library, read: Reader) -> None:
    print_books(lib.list_books())


def _shell_search(lib: Library, read: Reader) -> None:
    do_search(lib, read("Enter title keyword to search: "))


def _shell_update(lib: Library, read: Reader) -> None:
    book_id = _ask_id(read, "Enter ID to update: ")
    if book_id is None:
        return
    title = read("Enter new title: ")
    author = read("Enter new author: ")
    do_update(lib, book_id, title, author)


def _shell_delete(lib: Library, read: Reader) -> None:
    book_id = _ask_id(read, "Enter ID to delete: ")
    if book_id is not None:
        do_delete(lib, book_id)


# token -> (handler, wait for Enter afterwards)
SHELL_COMMANDS: Dict[str, Tuple[Callable[[Library, Reader], None], bool]] = {
    "VISITORS": (_shell_visitors, True),
    "ADDVISITOR": (_shell_add_visitor, False),
    "RENT": (_shell_rent, False),
    "RETURN": (_shell_return, True),
    "CREATE": (_shell_create, False),
    "READ": (_shell_read, True),
    "SEARCH": (_shell_search, True),
    "UPDATE": (_shell_update, False),
    "DELETE": (_shell_delete, False),
}


def render_menu() -> None:
    console.print(
        Panel(
            "[bold]Visitors Commands[/]\n[VISITORS] [ADDVISITOR] [RENT] [RETURN]\n\n"
            "[bold]Books Commands[/]\n[CREATE] [READ] [SEARCH] [UPDATE] [DELETE] [EXIT]",
            title=f"{APP_NAME}: available commands",
            border_style="green",
            box=box.HEAVY,
        ),
        markup=True,
        highlight=False,
    )


def run_shell(lib: Library, read: Reader = input) -> None:
    """Read commands until EXIT or end of input."""
    while True:
        render_menu()
        try:
            raw = read("Enter command: ")
        except EOFError:
            break

        cmd = raw.strip().upper()
        if cmd == "EXIT":
            print("Goodbye!")
            break

        entry = SHELL_COMMANDS.get(cmd)
        if entry is None:
            print("Unknown command.")
            continue

        handler, wait_after = entry
        try:
            try:
                handler(lib, read)
            except LibraryError as e:
                print(e)
            if wait_after:
                wait_for_return(read)
        except EOFError:
            break


if __name__ == "__main__":
    app()
