"""Connection session management for the pgCompare repository database.

A session is the one engine bound to the credentials the user logged in
with. It is owned by a ``ConnectionSessionManager`` that the hosting layer
creates and injects; nothing here is a module-level singleton.

The session has two states:

- ``DISCONNECTED``: no engine. ``get_active()`` rebuilds one if the
  credential store still holds credentials, otherwise it raises
  ``DatabaseNotInitializedError``.
- ``CONNECTED``: an engine is installed and returned as-is.

Every transition runs under one ``asyncio.Lock`` so that concurrent
callers never leave two engines open at once.
"""
import asyncio
import enum
import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.core.config import DEFAULT_SCHEMA, Settings, get_settings
from db.credentials import Credentials, CredentialStore, InMemoryCredentialStore
from db.errors import (
    DatabaseConnectionError,
    DatabaseNotInitializedError,
    driver_message,
)


logger = logging.getLogger(__name__)

EngineFactory = Callable[..., AsyncEngine]


class SessionState(str, enum.Enum):
    """Lifecycle states of a repository session."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ConnectionSessionManager:
    """Owns the engine for one set of repository credentials.

    Args:
        settings: Application settings (pool sizes, timeouts, echo).
        store: Where credentials are retained between handle losses.
        engine_factory: Builds engines; ``create_async_engine`` by default.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: CredentialStore | None = None,
        engine_factory: EngineFactory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store if store is not None else InMemoryCredentialStore()
        self._engine_factory = engine_factory or create_async_engine
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._schema = DEFAULT_SCHEMA
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        if self._engine is None:
            return SessionState.DISCONNECTED
        return SessionState.CONNECTED

    @property
    def is_active(self) -> bool:
        return self._engine is not None

    @property
    def schema(self) -> str:
        """Repository schema of the session (``pgcompare`` when inactive)."""
        return self._schema

    @property
    def credentials(self) -> Credentials | None:
        """Credentials retained for the session, if any.

        The password stays a ``SecretStr``; use ``to_public_dict()`` for output.
        """
        return self._store.load()

    async def test_connection(self, credentials: Credentials) -> bool:
        """Check that the credentials reach and authenticate against the database.

        A throwaway engine is opened, runs ``SELECT 1`` and is always
        disposed. Session state is not touched.

        Raises:
            DatabaseConnectionError: With the driver's message on any failure.
        """
        logger.info(
            "Testing connection to %s:%s/%s (schema=%s)",
            credentials.host,
            credentials.port,
            credentials.database,
            credentials.schema_name,
        )
        try:
            engine = self._build_engine(credentials, probe=True)
        except Exception as exc:  # noqa: BLE001
            raise DatabaseConnectionError(driver_message(exc)) from exc

        try:
            await asyncio.wait_for(
                self._probe(engine),
                timeout=self._settings.db_connect_timeout + self._settings.db_command_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise DatabaseConnectionError(
                f"Timed out connecting to {credentials.host}:{credentials.port}"
            ) from exc
        except Exception as exc:  # noqa: BLE001
            raise DatabaseConnectionError(driver_message(exc)) from exc
        finally:
            await self._dispose_quietly(engine)
        return True

    async def initialize(self, credentials: Credentials) -> AsyncEngine:
        """Install a new session bound to ``credentials``.

        Any previous engine is disposed first. Connectivity is not verified;
        call ``test_connection`` beforehand for a pre-flight check.
        """
        async with self._lock:
            return await self._initialize_locked(credentials)

    async def get_active(self) -> AsyncEngine:
        """Return the active engine, rebuilding it from stored credentials if needed.

        Raises:
            DatabaseNotInitializedError: If there is no engine and no credentials.
        """
        engine = self._engine
        if engine is not None:
            return engine

        async with self._lock:
            # Another caller may have rebuilt it while we waited
            if self._engine is not None:
                return self._engine
            credentials = self._store.load()
            if credentials is None:
                raise DatabaseNotInitializedError()
            logger.info("Reinitializing session from stored credentials")
            return await self._initialize_locked(credentials)

    async def close(self) -> None:
        """Dispose the active engine and clear all session state.

        Safe to call when nothing is active.
        """
        async with self._lock:
            engine = self._engine
            self._engine = None
            self._session_factory = None
            if engine is not None:
                await self._dispose_quietly(engine)
            self._store.clear()
            self._schema = DEFAULT_SCHEMA
        logger.info("Session closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get an ORM session on the active engine.

        Commits when the block exits cleanly, rolls back otherwise.

        Example:
            async with manager.session() as session:
                result = await session.execute(query)
        """
        await self.get_active()
        factory = self._session_factory
        if factory is None:
            raise DatabaseNotInitializedError()

        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Check if the session can run a query.

        Returns:
            bool: False when inactive or the query fails.
        """
        try:
            engine = await self.get_active()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:  # noqa: BLE001
            return False

    async def _initialize_locked(self, credentials: Credentials) -> AsyncEngine:
        previous = self._engine
        self._engine = None
        self._session_factory = None
        if previous is not None:
            await self._dispose_quietly(previous)

        try:
            engine = self._build_engine(credentials, probe=False)
        except Exception as exc:  # noqa: BLE001
            self._store.clear()
            self._schema = DEFAULT_SCHEMA
            raise DatabaseConnectionError(driver_message(exc)) from exc

        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._store.save(credentials)
        self._schema = credentials.schema_name
        logger.info("Session initialized for schema %s", self._schema)
        return engine

    def _build_engine(self, credentials: Credentials, *, probe: bool) -> AsyncEngine:
        engine_params: dict[str, Any] = {
            "echo": self._settings.database_echo,
            "connect_args": {
                "timeout": self._settings.db_connect_timeout,
                "command_timeout": self._settings.db_command_timeout,
                "server_settings": {"search_path": credentials.schema_name},
            },
        }

        if probe:
            # Probe connections are closed as soon as they are released
            engine_params["poolclass"] = NullPool
        else:
            engine_params.update(
                {
                    "pool_size": self._settings.db_pool_size,
                    "max_overflow": self._settings.db_max_overflow,
                    "pool_timeout": self._settings.db_pool_timeout,
                    "pool_recycle": self._settings.db_pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        return self._engine_factory(credentials.engine_url(), **engine_params)

    @staticmethod
    async def _probe(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @staticmethod
    async def _dispose_quietly(engine: AsyncEngine) -> None:
        try:
            await engine.dispose()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Ignoring error while disposing engine: %s", exc)
