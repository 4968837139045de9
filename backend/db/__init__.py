"""Repository database session management.

This module provides the connection session manager that gates every
access to the pgCompare repository database.
"""
from db.credentials import (
    Credentials,
    CredentialStore,
    InMemoryCredentialStore,
    process_credential_store,
)
from db.errors import (
    DatabaseSessionError,
    DatabaseConnectionError,
    DatabaseNotInitializedError,
)
from db.session_manager import ConnectionSessionManager, SessionState

__all__ = [
    "Credentials",
    "CredentialStore",
    "InMemoryCredentialStore",
    "process_credential_store",
    "DatabaseSessionError",
    "DatabaseConnectionError",
    "DatabaseNotInitializedError",
    "ConnectionSessionManager",
    "SessionState",
]
