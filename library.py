import logging
from typing import Any, Dict, List, Optional

from book import Book
from database import Kind, RecordStore
from errors import BookNotFoundError
from ledger import RentalLedger

logger = logging.getLogger(__name__)


class Library:
    """Manages the book catalog and wires it to the rental ledger."""

    def __init__(
        self,
        books_file: Optional[str] = None,
        visitors_file: Optional[str] = None,
        *,
        store: Optional[RecordStore] = None,
        enforce_single_holder: Optional[bool] = None,
    ) -> None:
        self.store = store or RecordStore(books_file=books_file, visitors_file=visitors_file)
        self.store.load_all()
        self.ledger = RentalLedger(self.store, enforce_single_holder=enforce_single_holder)

    # ------------------------- Core operations ------------------------- #
    def create_book(self, title: str, author: str) -> Book:
        book = Book(id=self.store.allocate_id(Kind.BOOKS), title=title, author=author)
        self.store.books[book.id] = book
        self.store.save(Kind.BOOKS)
        logger.debug(f"Book created: {book.id}")
        return book

    def list_books(self) -> List[Book]:
        return [self.store.books[book_id] for book_id in sorted(self.store.books)]

    def search_books(self, query: str) -> List[Book]:
        """Search titles for ``query``, ignoring case."""
        return [book for book in self.list_books() if book.matches(query)]

    def find_book(self, book_id: int) -> Optional[Book]:
        return self.store.books.get(book_id)

    def update_book(self, book_id: int, title: str, author: str) -> Book:
        """Replace title and author of an existing book."""
        book = self.find_book(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        book.title = title
        book.author = author
        self.store.save(Kind.BOOKS)
        logger.debug(f"Book updated: {book_id}")
        return book

    def remove_book(self, book_id: int) -> Book:
        """Delete a book from the catalog.

        Visitors who rented the book keep its id in their rented list; use
        ``self.ledger.holders_of`` to find them.
        """
        book = self.store.books.pop(book_id, None)
        if book is None:
            raise BookNotFoundError(book_id)
        self.store.save(Kind.BOOKS)
        logger.debug(f"Book deleted: {book_id}")
        return book

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_books": len(self.store.books),
            "total_visitors": len(self.store.visitors),
            "active_rentals": self.ledger.active_rentals(),
        }
