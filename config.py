import logging
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_log_level(name: str, default: str = "INFO") -> str:
    level = os.getenv(name, default).strip().upper()
    # getLevelName returns "Level X" for names it does not know
    if isinstance(logging.getLevelName(level), int):
        return level
    return default


@dataclass
class Settings:
    # Snapshot files
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.json")
    visitors_file: str = os.getenv("LIBRARY_VISITORS_FILE", "visitors.json")

    # Rental rules
    # Off by default: a book may be held by several visitors at once.
    enforce_single_holder: bool = _env_flag("LIBRARY_SINGLE_HOLDER")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library CLI")
    log_level: str = _env_log_level("LOG_LEVEL")
    # Shows the source location of each log record
    debug: bool = _env_flag("DEBUG")


settings = Settings()
