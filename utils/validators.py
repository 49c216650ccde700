import re
from typing import Optional

_ID_PATTERN = re.compile(r"^\+?\d+$")


class IDValidator:
    """Parses the numeric ids typed at the interactive prompts."""

    @staticmethod
    def normalize_id(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def is_valid_id(raw: Optional[str]) -> bool:
        s = IDValidator.normalize_id(raw)
        return bool(_ID_PATTERN.match(s)) and int(s) > 0

    @staticmethod
    def parse_id(raw: Optional[str]) -> int:
        """Return the id as an int or raise ValueError for anything else."""
        if not IDValidator.is_valid_id(raw):
            raise ValueError(f"Invalid ID: {IDValidator.normalize_id(raw)!r}")
        return int(IDValidator.normalize_id(raw))
