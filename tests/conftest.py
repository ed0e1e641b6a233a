"""Shared fixtures: an in-memory log store and a scripted Discord endpoint."""

from __future__ import annotations

import os
import tempfile
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Optional

# Settings are read at import time, so the environment is pinned before any
# relay module loads.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "relay-tests" / "app.log"))
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from relay import database  # noqa: E402
from relay.application.interfaces import LogEntryRepositoryInterface  # noqa: E402
from relay.controllers.dependencies import (  # noqa: E402
    get_destinations,
    get_log_repository,
)
from relay.main import app  # noqa: E402
from relay.services.discord import DiscordWebhookClient, get_discord_client  # noqa: E402
from relay.services.retention import utcnow  # noqa: E402
from relay.views.logs import LogEntryCreate, LogEntryRead  # noqa: E402

MAINCRO_URL = "https://discord.test/api/webhooks/111/main-token"
ALTCRO_URL = "https://discord.test/api/webhooks/222/alt-token"
THREAD_URL = "https://discord.test/api/webhooks/333/thread-token?thread_id=5"

DESTINATIONS = MappingProxyType(
    {
        "maincro": MAINCRO_URL,
        "altcro": ALTCRO_URL,
        "threadcro": THREAD_URL,
        "ducro": "",
    }
)


class InMemoryLogRepository(LogEntryRepositoryInterface):
    """List-backed stand-in for the SQL log store."""

    def __init__(self) -> None:
        self.entries: List[LogEntryRead] = []
        self.cutoffs: list = []
        self.fail_on_add = False
        self._next_id = 1

    def seed(self, account_name: str, *, age: timedelta, status: str = "Seeded") -> LogEntryRead:
        entry = LogEntryRead(
            id=self._next_id,
            account_name=account_name,
            status=status,
            location="Unknown",
            created_at=utcnow() - age,
        )
        self._next_id += 1
        self.entries.append(entry)
        return entry

    async def add(self, entry: LogEntryCreate) -> LogEntryRead:
        if self.fail_on_add:
            raise RuntimeError("log store unavailable")
        row = LogEntryRead(id=self._next_id, created_at=utcnow(), **entry.model_dump())
        self._next_id += 1
        self.entries.append(row)
        return row

    async def delete_older_than(self, cutoff) -> int:
        self.cutoffs.append(cutoff)
        kept = [entry for entry in self.entries if entry.created_at >= cutoff]
        removed = len(self.entries) - len(kept)
        self.entries = kept
        return removed

    async def list_recent(
        self,
        limit: int = 20,
        account_name: Optional[str] = None,
    ) -> List[LogEntryRead]:
        rows = [
            entry
            for entry in self.entries
            if account_name is None or entry.account_name == account_name
        ]
        rows.sort(key=lambda entry: (entry.created_at, entry.id), reverse=True)
        return rows[:limit]


class FakeDiscord:
    """Records forwarded requests and answers like Discord's ``wait=true`` mode."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {"id": "1", "attachments": [], "embeds": []}
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    def client(self) -> DiscordWebhookClient:
        return DiscordWebhookClient(timeout=5.0, transport=httpx.MockTransport(self))


@pytest.fixture
def repository() -> InMemoryLogRepository:
    return InMemoryLogRepository()


@pytest.fixture
def discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def client(repository: InMemoryLogRepository, discord: FakeDiscord):
    """Test client with the log store, Discord and account map replaced."""

    discord_client = discord.client()
    app.dependency_overrides[get_log_repository] = lambda: repository
    app.dependency_overrides[get_discord_client] = lambda: discord_client
    app.dependency_overrides[get_destinations] = lambda: DESTINATIONS

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def unreachable_store(monkeypatch, tmp_path):
    """Schema-scoped sessions bound to a database file that cannot be opened."""

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'relay.db'}",
        poolclass=NullPool,
    )
    monkeypatch.setattr(database, "_SCHEMA_NAME", "relay")
    database._install_search_path(engine)
    monkeypatch.setattr(
        database,
        "SessionFactory",
        async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession),
    )
    return engine


@pytest.fixture
def client_with_real_store(discord: FakeDiscord):
    """Test client that keeps the SQL repository wiring in place."""

    discord_client = discord.client()
    app.dependency_overrides[get_discord_client] = lambda: discord_client
    app.dependency_overrides[get_destinations] = lambda: DESTINATIONS

    yield TestClient(app)

    app.dependency_overrides.clear()
