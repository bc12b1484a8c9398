"""Shared test fixtures: in-memory SQLite key-value table, fake blob store, feed list files."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import structlog

from feedsync.db import Base, get_engine
from feedsync.storage import MemoryBlobStore


@pytest.fixture()
def engine():
    """Function-scoped SQLite engine with the plugin key-value table created."""
    eng = get_engine("sqlite:///:memory:")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def memory_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def log() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger("feedsync-test")


@pytest.fixture()
def write_feed_list(tmp_path: Path):
    """Write the given lines (joined with newlines, trailing newline) to a feed list file."""

    def _write(*lines: str, name: str = "feeds.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests configure logging against CliRunner streams; undo that after each test."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
