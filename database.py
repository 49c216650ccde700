"""JSON snapshot persistence for the book and visitor collections.

Each collection lives in its own file as a JSON object keyed by the entity id
(as a string). The whole file is rewritten after every mutation. A missing
file means an empty collection; a malformed one is reported and also yields an
empty collection so the session can continue.
"""

import json
import logging
import os
from enum import Enum
from typing import Callable, Dict, Optional, Union

from book import Book
from config import settings
from errors import DecodeError, WriteError
from visitor import Visitor

logger = logging.getLogger(__name__)

Entity = Union[Book, Visitor]


class Kind(str, Enum):
    BOOKS = "books"
    VISITORS = "visitors"


_DECODERS: Dict[Kind, Callable[[dict], Entity]] = {
    Kind.BOOKS: Book.from_dict,
    Kind.VISITORS: Visitor.from_dict,
}


class RecordStore:
    """Owns the in-memory collections, their snapshot files and id counters."""

    def __init__(self, books_file: Optional[str] = None, visitors_file: Optional[str] = None) -> None:
        self._paths: Dict[Kind, str] = {
            Kind.BOOKS: books_file or settings.books_file,
            Kind.VISITORS: visitors_file or settings.visitors_file,
        }
        self._collections: Dict[Kind, Dict[int, Entity]] = {Kind.BOOKS: {}, Kind.VISITORS: {}}
        self._next_ids: Dict[Kind, int] = {Kind.BOOKS: 1, Kind.VISITORS: 1}

    @property
    def books(self) -> Dict[int, Book]:
        return self._collections[Kind.BOOKS]  # type: ignore[return-value]

    @property
    def visitors(self) -> Dict[int, Visitor]:
        return self._collections[Kind.VISITORS]  # type: ignore[return-value]

    def path(self, kind: Union[Kind, str]) -> str:
        return self._paths[self._kind(kind)]

    # ------------------------- Identifiers ------------------------- #
    def next_id(self, kind: Union[Kind, str]) -> int:
        return self._next_ids[self._kind(kind)]

    def allocate_id(self, kind: Union[Kind, str]) -> int:
        kind = self._kind(kind)
        new_id = self._next_ids[kind]
        self._next_ids[kind] = new_id + 1
        return new_id

    # ------------------------- Load / save ------------------------- #
    def load_all(self) -> None:
        for kind in Kind:
            self.load(kind)

    def load(self, kind: Union[Kind, str]) -> Dict[int, Entity]:
        """Replace the collection for ``kind`` with the persisted snapshot."""
        kind = self._kind(kind)
        path = self._paths[kind]
        collection: Dict[int, Entity] = {}

        if not os.path.exists(path):
            logger.info(f"No {kind.value} file found, starting fresh.")
        else:
            try:
                collection = self._read_snapshot(kind, path)
                logger.debug(f"Loaded {len(collection)} {kind.value} from {path}")
            except DecodeError as e:
                logger.error(f"Error reading {kind.value}: {e}")
                collection = {}

        self._collections[kind] = collection
        self._next_ids[kind] = max(collection, default=0) + 1
        return collection

    def save(self, kind: Union[Kind, str]) -> bool:
        """Rewrite the snapshot for ``kind``. Returns False if the write failed.

        A failed write is logged and swallowed here: the caller's in-memory
        change stays applied and the next successful save brings the file back
        in line.
        """
        kind = self._kind(kind)
        path = self._paths[kind]
        payload = {
            str(entity_id): entity.to_dict()
            for entity_id, entity in sorted(self._collections[kind].items())
        }
        try:
            self._write_snapshot(path, payload)
        except WriteError as e:
            logger.error(f"Error saving {kind.value}: {e}")
            return False
        logger.debug(f"Saved {len(payload)} {kind.value} to {path}")
        return True

    # ------------------------- Helpers ------------------------- #
    @staticmethod
    def _kind(kind: Union[Kind, str]) -> Kind:
        try:
            return Kind(kind)
        except ValueError:
            raise ValueError(f"Unknown collection kind: {kind!r}") from None

    @staticmethod
    def _read_snapshot(kind: Kind, path: str) -> Dict[int, Entity]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise DecodeError(path, str(e)) from e

        if not isinstance(raw, dict):
            raise DecodeError(path, f"expected a JSON object, got {type(raw).__name__}")

        decode = _DECODERS[kind]
        collection: Dict[int, Entity] = {}
        for key, item in raw.items():
            try:
                entity_id = int(key)
                if not isinstance(item, dict):
                    raise TypeError(f"entry {key!r} is not an object")
                entity = decode(item)
            except (KeyError, TypeError, ValueError) as e:
                raise DecodeError(path, f"invalid entry {key!r}: {e}") from e
            if entity.id != entity_id:
                raise DecodeError(path, f"entry {key!r} has mismatching id {entity.id}")
            collection[entity_id] = entity
        return collection

    @staticmethod
    def _write_snapshot(path: str, payload: dict) -> None:
        """Write payload as pretty-printed JSON, replacing the file atomically."""
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise WriteError(path, str(e)) from e
