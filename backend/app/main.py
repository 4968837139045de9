"""FastAPI application for the pgCompare dashboard API.

This application provides the REST API behind the pgCompare dashboard:
logging in to a repository database, browsing projects and tables,
editing mappings, and reading compare results.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from db.credentials import process_credential_store
from db.errors import DatabaseNotInitializedError, driver_message
from db.session_manager import ConnectionSessionManager


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Installs the repository session manager on startup and closes the
    session on shutdown.
    """
    app.state.session_manager = ConnectionSessionManager(
        settings=settings,
        store=process_credential_store,
    )
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    try:
        await app.state.session_manager.close()
    except Exception as e:
        logger.error("Error closing repository session: %s", e)


# Create FastAPI application with lifespan handler
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DatabaseNotInitializedError)
async def not_initialized_handler(request: Request, exc: DatabaseNotInitializedError):
    """Ask the client to log in again."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": str(exc)},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Surface repository query failures with the driver's message."""
    message = driver_message(exc)
    logger.error("Database error on %s: %s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint.

    Returns the health status of the application and its repository session.
    """
    manager: ConnectionSessionManager = request.app.state.session_manager
    db_healthy = await manager.health_check()

    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_healthy else "disconnected",
        "schema": manager.schema,
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "docs_url": "/docs",
        "health_url": "/health",
    }


# Include API routers
from app.api.auth import router as auth_router
from app.api.projects import router as projects_router
from app.api.tables import router as tables_router
from app.api.columns import router as columns_router
from app.api.results import router as results_router

app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(tables_router)
app.include_router(columns_router)
app.include_router(results_router)


def main() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
