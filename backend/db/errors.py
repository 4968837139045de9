"""Errors raised by the connection session manager."""


class DatabaseSessionError(Exception):
    """Base class for session lifecycle errors."""


class DatabaseConnectionError(DatabaseSessionError):
    """Raised when the repository database cannot be reached or authenticated.

    The message is the underlying driver's message, unchanged.
    """


class DatabaseNotInitializedError(DatabaseSessionError):
    """Raised when no session is active and no credentials are stored."""

    def __init__(self, message: str = "Database not initialized. Please login again.") -> None:
        super().__init__(message)


def driver_message(exc: BaseException) -> str:
    """Return the message of the driver error behind ``exc``.

    SQLAlchemy wraps DBAPI errors (``exc.orig``) and the asyncpg adapter in
    turn wraps the native asyncpg exception as its ``__cause__``; the
    innermost message is what the user should see.
    """
    orig = getattr(exc, "orig", None)
    if orig is not None:
        return str(orig.__cause__ or orig)
    return str(exc)
