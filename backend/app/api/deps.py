"""Request dependencies shared by the API routers."""
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.errors import DatabaseConnectionError, DatabaseNotInitializedError
from db.session_manager import ConnectionSessionManager


def get_session_manager(request: Request) -> ConnectionSessionManager:
    """Return the session manager installed on the application."""
    return request.app.state.session_manager


async def get_db_session(
    manager: ConnectionSessionManager = Depends(get_session_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency injection for endpoints that read the repository.

    Yields:
        AsyncSession: A session on the active engine.

    Raises:
        HTTPException: 401 when nobody is logged in, 503 when the engine
            cannot be rebuilt.
    """
    try:
        await manager.get_active()
    except DatabaseNotInitializedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except DatabaseConnectionError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    async with manager.session() as session:
        yield session
