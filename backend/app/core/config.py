"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SCHEMA = "pgcompare"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PGCOMPARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "pgCompare Dashboard API"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level")

    # Server
    host: str = Field(default="127.0.0.1", description="Bind address for uvicorn")
    port: int = Field(default=8000, description="Bind port for uvicorn")

    # Repository database
    database_echo: bool = Field(default=False, description="Log SQL queries")
    db_pool_size: int = Field(default=5, description="Database connection pool size")
    db_max_overflow: int = Field(default=5, description="Max overflow connections")
    db_pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    db_pool_recycle: int = Field(
        default=3600, description="Recycle connections after N seconds"
    )
    db_connect_timeout: float = Field(
        default=10.0, description="Seconds allowed to establish a connection"
    )
    db_command_timeout: float = Field(
        default=30.0, description="Seconds allowed for a single statement"
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    @field_validator("db_connect_timeout", "db_command_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject timeouts that would block callers indefinitely."""
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
