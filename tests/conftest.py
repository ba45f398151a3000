"""Root conftest — shared test configuration and a fresh item store per test."""

import os

# Keep tests on the in-memory sqlite3 store regardless of the developer's env
os.environ.setdefault("REPO_DRIVER", "sqlite3")
os.environ.setdefault("REPO_URI", "")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from payments_api.config import RepoConfig
from payments_api.infrastructure.sql_item_store import new_store


@pytest.fixture
async def store():
    """In-memory sqlite3 store with the items table created."""
    s = new_store(RepoConfig())
    await s.migrate()
    yield s
    await s.close()


@pytest.fixture
async def file_store(tmp_path):
    """File-backed sqlite3 store: separate connections per transaction."""
    s = new_store(RepoConfig(uri=str(tmp_path / "payments.db")))
    await s.migrate()
    yield s
    await s.close()
