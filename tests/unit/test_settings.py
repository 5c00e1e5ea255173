"""
Unit Tests - Configuration
"""
import pytest
from pydantic import ValidationError

from storefront.config import Settings
from storefront.config.settings import DatabaseSettings


class TestDatabaseSettings:
    """Tests for DatabaseSettings.async_url"""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgres://u:p@db:5432/shop", "postgresql+asyncpg://u:p@db:5432/shop"),
            ("postgresql://u:p@db:5432/shop", "postgresql+asyncpg://u:p@db:5432/shop"),
            ("postgresql+asyncpg://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
            ("sqlite:///./shop.db", "sqlite+aiosqlite:///./shop.db"),
        ],
    )
    def test_connection_string_uses_async_driver(self, url, expected):
        assert DatabaseSettings(url=url).async_url == expected

    def test_database_url_from_environment(self, monkeypatch):
        """Test DATABASE_URL is the connection string"""
        monkeypatch.setenv("DATABASE_URL", "postgres://env:pw@envhost/envdb")

        assert DatabaseSettings().async_url == "postgresql+asyncpg://env:pw@envhost/envdb"

    def test_url_built_from_parts(self, monkeypatch):
        """Test the URL falls back to host, port and credentials"""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = DatabaseSettings(host="db", port=6543, db="shop", user="app", password="pw")

        assert settings.async_url == "postgresql+asyncpg://app:pw@db:6543/shop"


class TestSettings:
    """Tests for Settings"""

    def test_default_port(self, monkeypatch):
        monkeypatch.delenv("API_PORT", raising=False)

        assert Settings().api_port == 8080

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(app_env="moon")

    def test_environment_is_normalised(self):
        settings = Settings(app_env="Production")

        assert settings.is_production
        assert not settings.is_development
