"""Shared fixtures for quickfind tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from quickfind.config import Config
from quickfind.data.db import Database
from quickfind.data.store import IndexStore


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """A small project tree with a dependency folder and a hidden folder."""
    root = tmp_path / "root"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.x").write_text("main", encoding="utf-8")
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "node_modules" / "dep" / "index.x").write_text("dep", encoding="utf-8")
    return root


@pytest.fixture
def test_config(sample_tree: Path) -> Config:
    """Config crawling only the sample tree."""
    return Config(include=[str(sample_tree)], ignore=["**/node_modules/**"], depth=10)


@pytest.fixture
async def test_db(tmp_path: Path) -> AsyncGenerator[Database]:
    """A fresh on-disk test database."""
    db = Database(tmp_path / "cache" / "db.sqlite")
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
def store(in_memory_db: Database) -> IndexStore:
    return IndexStore(in_memory_db)
