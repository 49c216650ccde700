from __future__ import annotations


class Book:
    """A single book in the catalog."""

    def __init__(self, id: int, title: str, author: str) -> None:
        self.id = id
        self.title = title
        self.author = author

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against the title."""
        return query.lower() in self.title.lower()

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        book_id = data["id"]
        title = data["title"]
        author = data["author"]
        if not isinstance(book_id, int) or isinstance(book_id, bool):
            raise TypeError(f"book id must be an integer, got {book_id!r}")
        if not isinstance(title, str) or not isinstance(author, str):
            raise TypeError("book title and author must be strings")
        return Book(id=book_id, title=title, author=author)
