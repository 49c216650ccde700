from __future__ import annotations

import logging
from typing import List, Optional

from config import settings
from database import Kind, RecordStore
from errors import (
    AlreadyRentedError,
    BookNotFoundError,
    BookUnavailableError,
    NotRentedError,
    VisitorNotFoundError,
)
from visitor import Visitor

logger = logging.getLogger(__name__)


class RentalLedger:
    """Tracks which visitor holds which book.

    A book's rental status is not stored on the book; it is derived from the
    ``rented_ids`` of every visitor. By default the same book may sit in
    several visitors' lists at once; ``enforce_single_holder`` turns that into
    an error at rent time.
    """

    def __init__(self, store: RecordStore, enforce_single_holder: Optional[bool] = None) -> None:
        self.store = store
        if enforce_single_holder is None:
            enforce_single_holder = settings.enforce_single_holder
        self.enforce_single_holder = enforce_single_holder

    # ------------------------- Visitors ------------------------- #
    def add_visitor(self, name: str) -> Visitor:
        visitor = Visitor(id=self.store.allocate_id(Kind.VISITORS), name=name)
        self.store.visitors[visitor.id] = visitor
        self.store.save(Kind.VISITORS)
        logger.debug(f"Visitor added: {visitor.id}")
        return visitor

    def find_visitor(self, visitor_id: int) -> Optional[Visitor]:
        return self.store.visitors.get(visitor_id)

    def get_visitor(self, visitor_id: int) -> Visitor:
        visitor = self.find_visitor(visitor_id)
        if visitor is None:
            raise VisitorNotFoundError(visitor_id)
        return visitor

    def list_visitors(self) -> List[Visitor]:
        return [self.store.visitors[vid] for vid in sorted(self.store.visitors)]

    def holders_of(self, book_id: int) -> List[int]:
        """Ids of the visitors whose rented list contains ``book_id``."""
        return [v.id for v in self.list_visitors() if v.has_rented(book_id)]

    # ------------------------- Transitions ------------------------- #
    def rent(self, visitor_id: int, book_id: int) -> Visitor:
        visitor = self.get_visitor(visitor_id)

        if not any(book.id == book_id for book in self.store.books.values()):
            raise BookNotFoundError(book_id)

        if visitor.has_rented(book_id):
            raise AlreadyRentedError(visitor_id, book_id)

        if self.enforce_single_holder:
            holders = self.holders_of(book_id)
            if holders:
                raise BookUnavailableError(visitor_id, book_id, holders[0])

        visitor.rented_ids.append(book_id)
        self.store.save(Kind.VISITORS)
        logger.debug(f"Visitor {visitor_id} rented book {book_id}")
        return visitor

    def return_book(self, visitor_id: int, book_id: int) -> Visitor:
        visitor = self.get_visitor(visitor_id)
        if not visitor.has_rented(book_id):
            raise NotRentedError(visitor_id, book_id)

        # list.remove drops the first match and keeps the order of the rest
        visitor.rented_ids.remove(book_id)
        self.store.save(Kind.VISITORS)
        logger.debug(f"Visitor {visitor_id} returned book {book_id}")
        return visitor

    def active_rentals(self) -> int:
        return sum(len(v.rented_ids) for v in self.store.visitors.values())
