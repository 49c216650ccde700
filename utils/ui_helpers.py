import os
import json
from typing import List, Any, Dict, Callable
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_books(books: List[Any], empty_message: str = "No books found.") -> None:
    """Print books in the current output mode.
    - plain: 'ID: 1, Title: Dune, Author: Herbert' lines, or the empty message
    - json: array of id, title, author
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        for b in books:
            table.add_row(str(b.id), b.title, b.author)
        _console.print(table)
    else:
        for b in books:
            print(f"ID: {b.id}, Title: {b.title}, Author: {b.author}")

def print_visitors(visitors: List[Any]) -> None:
    """Print visitors with the books they are renting."""
    mode = get_output_mode()

    if not visitors:
        print("No visitors found.")
        return

    if mode == "json":
        print(json.dumps([v.to_dict() for v in visitors], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="🧑 Visitors", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Renting", style="white")
        for v in visitors:
            table.add_row(str(v.id), v.name, v.renting_summary())
        _console.print(table)
    else:
        for v in visitors:
            print(f"ID: {v.id}, Name: {v.name}, Renting: {v.renting_summary()}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    total = stats.get("total_books", 0)
    visitors = stats.get("total_visitors", 0)
    rentals = stats.get("active_rentals", 0)

    if mode == "json":
        print(json.dumps({"total_books": total, "total_visitors": visitors, "active_rentals": rentals}))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {total}\n"
            f"[bold]Total Visitors:[/] {visitors}\n"
            f"[bold]Active Rentals:[/] {rentals}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {total}")
        print(f"Total Visitors: {visitors}")
        print(f"Active Rentals: {rentals}")

def wait_for_return(read: Callable[[str], str] = input) -> None:
    """Block until the user submits an empty line."""
    while read("\npress Enter to return: ") != "":
        pass
