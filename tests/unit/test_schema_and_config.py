"""
Unit tests for schema DDL generation, settings and password hashing.

Tests cover:
- CREATE TABLE/INDEX statements compiled from the SQLAlchemy models
- Cascading foreign keys
- Settings validation and DSN normalization
- bcrypt hashing through the user service
"""

import pytest
from pydantic import ValidationError

from api.src.config import Settings, clear_settings_cache, get_settings
from api.src.repositories.schema import schema_statements
from api.src.services.user_service import UserService


class TestSchemaStatements:
    """Tests for schema_statements."""

    @pytest.fixture
    def statements(self):
        return schema_statements()

    def test_tables_in_dependency_order(self, statements):
        tables = [s for s in statements if s.startswith("CREATE TABLE")]

        assert [s.split()[5] for s in tables] == ["users", "contacts", "addresses"]

    def test_statements_are_idempotent(self, statements):
        assert all("IF NOT EXISTS" in statement for statement in statements)

    def test_foreign_keys_cascade(self, statements):
        contacts = next(s for s in statements if "TABLE IF NOT EXISTS contacts" in s)
        addresses = next(s for s in statements if "TABLE IF NOT EXISTS addresses" in s)

        assert "REFERENCES users (username) ON DELETE CASCADE" in contacts
        assert "REFERENCES contacts (id) ON DELETE CASCADE" in addresses

    def test_ids_are_serial(self, statements):
        contacts = next(s for s in statements if "TABLE IF NOT EXISTS contacts" in s)

        assert "id SERIAL NOT NULL" in contacts

    def test_indexes_created(self, statements):
        indexes = [s for s in statements if s.startswith("CREATE INDEX")]

        assert any("idx_contacts_username" in s for s in indexes)
        assert any("idx_addresses_contact_id" in s for s in indexes)


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.api_prefix == "/api"
        assert settings.token_header == "X-API-TOKEN"
        assert settings.pagination_default_size == 10
        assert settings.pagination_max_size == 100

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("log_level", "LOUD"),
        ("environment", "moon"),
        ("log_format", "xml"),
        ("password_bcrypt_rounds", 3),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CONTACT_API_PAGINATION_MAX_SIZE", "50")

        assert Settings().pagination_max_size == 50

    @pytest.mark.parametrize("url,expected", [
        ("postgresql://u:p@db:5432/contacts", "postgresql://u:p@db:5432/contacts"),
        ("postgresql+asyncpg://u:p@db:5432/contacts", "postgresql://u:p@db:5432/contacts"),
        ("postgresql+psycopg2://u:p@db:5432/contacts", "postgresql://u:p@db:5432/contacts"),
    ])
    def test_database_dsn(self, url, expected):
        assert Settings(database_url=url).database_dsn == expected

    def test_get_settings_is_cached(self, monkeypatch):
        clear_settings_cache()
        monkeypatch.setenv("CONTACT_API_APP_NAME", "Cached API")
        try:
            assert get_settings() is get_settings()
            assert get_settings().app_name == "Cached API"
        finally:
            clear_settings_cache()


class TestPasswordHashing:
    """Tests for UserService password helpers."""

    @pytest.fixture
    def service(self):
        return UserService(user_repo=None, settings=Settings(password_bcrypt_rounds=4))

    def test_hash_and_verify(self, service):
        hashed = service.hash_password("rahasia")

        assert hashed != "rahasia"
        assert service.verify_password("rahasia", hashed)
        assert not service.verify_password("salah", hashed)

    def test_verify_against_garbage_hash(self, service):
        assert service.verify_password("rahasia", "not-a-hash") is False
