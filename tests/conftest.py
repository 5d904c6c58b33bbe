# tests/conftest.py
from __future__ import annotations

import pytest

QUIETUS_ENV = (
    "QUIETUS_REGISTRY_PATH",
    "QUIETUS_DEFAULT_INACTIVITY_DAYS",
    "QUIETUS_USER_AGENT",
    "QUIETUS_FETCH_TIMEOUT_S",
    "QUIETUS_MAX_ENTITY_CHARS",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in QUIETUS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_registry(tmp_path):
    """Write registry lines to a temp file and return its path."""
    def _write(lines: list[str], name: str = "company_feeds.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write

