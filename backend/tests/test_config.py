"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self):
        """Test default timeouts and pool settings."""
        settings = Settings()
        assert settings.db_connect_timeout > 0
        assert settings.db_command_timeout > 0
        assert settings.environment == "development"

    def test_env_prefix(self, monkeypatch):
        """Test reading values from PGCOMPARE_ variables."""
        monkeypatch.setenv("PGCOMPARE_DB_CONNECT_TIMEOUT", "2.5")
        monkeypatch.setenv("PGCOMPARE_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.db_connect_timeout == 2.5
        assert settings.log_level == "debug"

    @pytest.mark.parametrize("field", ["db_connect_timeout", "db_command_timeout"])
    def test_non_positive_timeout_rejected(self, field):
        """Test that unbounded waits cannot be configured."""
        with pytest.raises(ValidationError):
            Settings(**{field: 0})
