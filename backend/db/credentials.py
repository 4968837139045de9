"""Repository credentials and the process-wide credential store."""
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from sqlalchemy.engine import URL

from app.core.config import DEFAULT_SCHEMA


# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_."
_PASSWORD_SAFE_CHARS = "!~*'()"


class Credentials(BaseModel):
    """Connection details for a pgCompare repository database.

    The password is a ``SecretStr`` so it never shows up in ``repr()``,
    logs, or validation errors.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = Field(min_length=1)
    port: int = Field(default=5432, ge=1, le=65535)
    database: str = Field(min_length=1)
    schema_name: str = Field(default=DEFAULT_SCHEMA, alias="schema")
    user: str = Field(min_length=1)
    password: SecretStr

    @field_validator("schema_name", mode="before")
    @classmethod
    def default_schema(cls, v: Any) -> Any:
        """Resolve a missing or blank schema to the pgCompare default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_SCHEMA
        return v

    @property
    def connection_string(self) -> str:
        """Connection string in the format pgCompare tooling shares."""
        password = quote(self.password.get_secret_value(), safe=_PASSWORD_SAFE_CHARS)
        return (
            f"postgresql://{self.user}:{password}@{self.host}:{self.port}"
            f"/{self.database}?schema={self.schema_name}"
        )

    @property
    def masked_connection_string(self) -> str:
        """Connection string safe for display."""
        return (
            f"postgresql://{self.user}:***@{self.host}:{self.port}"
            f"/{self.database}?schema={self.schema_name}"
        )

    def engine_url(self) -> URL:
        """SQLAlchemy URL for the asyncpg dialect.

        The schema is not part of the URL; the engine applies it through
        the connection's ``search_path``.
        """
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def to_public_dict(self) -> dict[str, Any]:
        """Credentials without the password, keyed the way clients send them."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "schema": self.schema_name,
            "user": self.user,
        }


@runtime_checkable
class CredentialStore(Protocol):
    """Storage slot for the credentials of the active session."""

    def load(self) -> Credentials | None:
        """Return stored credentials, if any."""

    def save(self, credentials: Credentials) -> None:
        """Replace the stored credentials."""

    def clear(self) -> None:
        """Forget stored credentials."""


class InMemoryCredentialStore:
    """Credential store backed by process memory."""

    def __init__(self) -> None:
        self._credentials: Credentials | None = None

    def load(self) -> Credentials | None:
        return self._credentials

    def save(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def clear(self) -> None:
        self._credentials = None


# Survives for the lifetime of the process, independent of any engine handle
process_credential_store = InMemoryCredentialStore()
