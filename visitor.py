from __future__ import annotations

from typing import List, Optional


class Visitor:
    """A library visitor and the ids of the books they currently hold."""

    def __init__(self, id: int, name: str, rented_ids: Optional[List[int]] = None) -> None:
        self.id = id
        self.name = name
        self.rented_ids: List[int] = list(rented_ids or [])

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} (ID: {self.id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Visitor):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def has_rented(self, book_id: int) -> bool:
        return book_id in self.rented_ids

    def renting_summary(self) -> str:
        if not self.rented_ids:
            return "none"
        return "Book ID(s) " + ", ".join(str(book_id) for book_id in self.rented_ids)

    def to_dict(self) -> dict:
        # "rented_book_id" is the on-disk field name for the rented sequence
        return {"id": self.id, "name": self.name, "rented_book_id": list(self.rented_ids)}

    @staticmethod
    def from_dict(data: dict) -> "Visitor":
        visitor_id = data["id"]
        name = data["name"]
        if not isinstance(visitor_id, int) or isinstance(visitor_id, bool):
            raise TypeError(f"visitor id must be an integer, got {visitor_id!r}")
        if not isinstance(name, str):
            raise TypeError("visitor name must be a string")

        # Older snapshots store null for visitors who never rented anything
        rented = data.get("rented_book_id")
        if rented is None:
            rented = []
        if not isinstance(rented, list) or not all(
            isinstance(book_id, int) and not isinstance(book_id, bool) for book_id in rented
        ):
            raise TypeError("rented_book_id must be a list of integers")
        if len(set(rented)) != len(rented):
            raise ValueError(f"visitor {visitor_id} has duplicate rented book ids")
        return Visitor(id=visitor_id, name=name, rented_ids=rented)
