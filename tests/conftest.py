"""Pytest bootstrap configuration.

Every test gets its own SQLite file under ``tmp_path`` and listeners bound
to ephemeral localhost ports, so nothing leaks between tests.
"""
from typing import AsyncIterator

import pytest

from core.config import Settings
from infrastructure.store import SQLAlchemySubscriberStore, open_store


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DB_PATH=str(tmp_path / "list.db"),
        BIND_GRPC="127.0.0.1:0",
        BIND_JSON="127.0.0.1:0",
    )


@pytest.fixture
async def store(settings) -> AsyncIterator[SQLAlchemySubscriberStore]:
    async with open_store(settings) as s:
        await s.create_if_absent()
        yield s


@pytest.fixture
async def seeded_store(store) -> SQLAlchemySubscriberStore:
    """Store holding five subscribers, created in order."""
    for i in range(5):
        await store.create(f"user{i}@example.com")
    return store
