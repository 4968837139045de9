"""Shared fixtures: fake engines standing in for asyncpg-backed ones."""

import asyncio
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.engine import URL

from app.core.config import Settings
from db.credentials import Credentials, InMemoryCredentialStore
from db.session_manager import ConnectionSessionManager


class FakeConnection:
    """Connection that records the statements it executes."""

    def __init__(self, engine: "FakeEngine"):
        self.engine = engine

    async def execute(self, statement: Any, *args: Any) -> MagicMock:
        self.engine.statements.append(str(statement))
        if self.engine.query_error is not None:
            raise self.engine.query_error
        return MagicMock()


class FakeEngine:
    """Stand-in for ``AsyncEngine`` tracking connects and disposal."""

    def __init__(
        self,
        url: URL,
        params: dict[str, Any],
        *,
        connect_error: BaseException | None = None,
        query_error: BaseException | None = None,
        dispose_error: BaseException | None = None,
        hang: bool = False,
    ):
        self.url = url
        self.params = params
        self.connect_error = connect_error
        self.query_error = query_error
        self.dispose_error = dispose_error
        self.hang = hang
        self.statements: list[str] = []
        self.open_connections = 0
        self.disposed = False

    @asynccontextmanager
    async def connect(self):
        if self.hang:
            await asyncio.sleep(3600)
        if self.connect_error is not None:
            raise self.connect_error
        self.open_connections += 1
        try:
            yield FakeConnection(self)
        finally:
            self.open_connections -= 1

    async def dispose(self) -> None:
        self.disposed = True
        if self.dispose_error is not None:
            raise self.dispose_error


class FakeEngineFactory:
    """Engine factory recording every engine it builds.

    Failure knobs apply to engines built after they are set.
    """

    def __init__(self) -> None:
        self.engines: list[FakeEngine] = []
        self.connect_error: BaseException | None = None
        self.query_error: BaseException | None = None
        self.dispose_error: BaseException | None = None
        self.build_error: BaseException | None = None
        self.hang = False

    def __call__(self, url: URL, **params: Any) -> FakeEngine:
        if self.build_error is not None:
            raise self.build_error
        engine = FakeEngine(
            url,
            params,
            connect_error=self.connect_error,
            query_error=self.query_error,
            dispose_error=self.dispose_error,
            hang=self.hang,
        )
        self.engines.append(engine)
        return engine

    @property
    def last(self) -> FakeEngine:
        return self.engines[-1]


class FakeSession:
    """Stand-in for ``AsyncSession`` recording commits and rollbacks."""

    def __init__(self, result: Any = None, error: BaseException | None = None):
        self.execute = AsyncMock(return_value=result, side_effect=error)
        self.commit = AsyncMock()
        self.rollback = AsyncMock()
        self.closed = False

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        self.closed = True
        return False


class FakeSessionFactory:
    """Replacement for ``async_sessionmaker`` handing out ``FakeSession``s."""

    def __init__(self) -> None:
        self.sessions: list[FakeSession] = []
        self.result: Any = MagicMock()
        self.execute_error: BaseException | None = None

    def __call__(self) -> FakeSession:
        session = FakeSession(self.result, self.execute_error)
        self.sessions.append(session)
        return session

    @property
    def last(self) -> FakeSession:
        return self.sessions[-1]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_echo=False,
        db_connect_timeout=0.05,
        db_command_timeout=0.05,
    )


@pytest.fixture
def engine_factory() -> FakeEngineFactory:
    return FakeEngineFactory()


@pytest.fixture
def session_factory(monkeypatch) -> FakeSessionFactory:
    factory = FakeSessionFactory()
    monkeypatch.setattr("db.session_manager.async_sessionmaker", lambda **kwargs: factory)
    return factory


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def manager(test_settings, credential_store, engine_factory) -> ConnectionSessionManager:
    return ConnectionSessionManager(
        settings=test_settings,
        store=credential_store,
        engine_factory=engine_factory,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        host="db.internal",
        port=5432,
        database="reconcile",
        schema="pgcompare",
        user="admin",
        password="s3cret",
    )


@pytest.fixture
def other_credentials() -> Credentials:
    return Credentials(
        host="replica.internal",
        port=6432,
        database="reconcile",
        schema="audit",
        user="auditor",
        password="other",
    )
