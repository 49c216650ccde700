"""Exceptions raised by the catalog, the rental ledger and the record store."""

from __future__ import annotations


class LibraryError(Exception):
    """Base class for every error the library reports to the user."""


class NotFoundError(LibraryError, LookupError):
    entity = "Entity"

    def __init__(self, entity_id: int) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class BookNotFoundError(NotFoundError):
    entity = "Book"


class VisitorNotFoundError(NotFoundError):
    entity = "Visitor"


class RentalError(LibraryError, ValueError):
    """A rent or return that is not valid for the visitor's current state."""

    def __init__(self, visitor_id: int, book_id: int, message: str) -> None:
        self.visitor_id = visitor_id
        self.book_id = book_id
        super().__init__(message)


class AlreadyRentedError(RentalError):
    def __init__(self, visitor_id: int, book_id: int) -> None:
        super().__init__(visitor_id, book_id, "Visitor already rented this book.")


class NotRentedError(RentalError):
    def __init__(self, visitor_id: int, book_id: int) -> None:
        super().__init__(
            visitor_id, book_id, "This book is not currently rented by the visitor."
        )


class BookUnavailableError(RentalError):
    def __init__(self, visitor_id: int, book_id: int, holder_id: int) -> None:
        self.holder_id = holder_id
        super().__init__(
            visitor_id, book_id, f"Book {book_id} is already rented by visitor {holder_id}."
        )


class StorageError(LibraryError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DecodeError(StorageError):
    """Snapshot content could not be turned back into entities."""


class WriteError(StorageError):
    """Snapshot could not be written to disk."""
