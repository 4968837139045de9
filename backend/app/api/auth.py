"""Auth API endpoints: open and close the repository session.

There is a single shared credential set; logging in replaces whatever
session was active before.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_session_manager
from db.credentials import Credentials
from db.errors import DatabaseConnectionError
from db.session_manager import ConnectionSessionManager


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    credentials: Credentials,
    manager: ConnectionSessionManager = Depends(get_session_manager),
) -> Any:
    """Validate the credentials, then make them the active session.

    Args:
        credentials: Repository connection details
        manager: Session manager

    Returns:
        ``{"success": true}``, or 401 with the driver's error message
    """
    logger.info(
        "Login attempt for %s/%s (schema=%s)",
        credentials.host,
        credentials.database,
        credentials.schema_name,
    )
    try:
        await manager.test_connection(credentials)
        await manager.initialize(credentials)
    except DatabaseConnectionError as e:
        logger.error("Login failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": str(e)},
        )

    logger.info("Login successful, session initialized")
    return {"success": True}


@router.post("/logout")
async def logout(
    manager: ConnectionSessionManager = Depends(get_session_manager),
) -> dict[str, bool]:
    """Close the active session. Always succeeds."""
    await manager.close()
    return {"success": True}


@router.get("/status")
async def session_status(
    manager: ConnectionSessionManager = Depends(get_session_manager),
) -> dict[str, Any]:
    """Report whether a session is active and what it is bound to."""
    payload: dict[str, Any] = {
        "connected": manager.is_active,
        "schema": manager.schema,
    }
    credentials = manager.credentials
    if credentials is not None:
        public = credentials.to_public_dict()
        payload.update(
            {
                "host": public["host"],
                "port": public["port"],
                "database": public["database"],
                "user": public["user"],
            }
        )
    return payload
