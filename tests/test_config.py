import pytest

from config import _env_flag, _env_log_level


@pytest.mark.parametrize("raw,expected", [
    ("debug", "DEBUG"),
    (" warning ", "WARNING"),
    ("verbose", "INFO"),
    ("", "INFO"),
])
def test_log_level_from_env(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert _env_log_level("LOG_LEVEL") == expected


def test_log_level_default(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert _env_log_level("LOG_LEVEL") == "INFO"


@pytest.mark.parametrize("raw,expected", [("true", True), ("YES", True), ("1", True), ("no", False)])
def test_env_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("LIBRARY_SINGLE_HOLDER", raw)
    assert _env_flag("LIBRARY_SINGLE_HOLDER") is expected
