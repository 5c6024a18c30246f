"""Tests for settings and application errors."""

import pytest

from ledger.config import (
    ImportSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from ledger.errors import AppError, ValidationError


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """pydantic-settings configuration."""

    def test_defaults(self, monkeypatch):
        """Test defaults when nothing is configured."""
        monkeypatch.delenv("LEDGER_STORAGE_BACKEND", raising=False)
        settings = get_settings()
        assert settings.storage.backend == "memory"
        assert settings.imports.delimiter == ","
        assert settings.imports.from_line == 2
        assert settings.imports.encoding == "utf-8"
        assert settings.imports.encoding_errors == "replace"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Test LEDGER_* variables are picked up."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("LEDGER_STORAGE_DATABASE_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("LEDGER_IMPORT_DELIMITER", ";")
        settings = get_settings()
        assert settings.storage.backend == "sqlite"
        assert settings.storage.database_path.endswith("x.db")
        assert settings.imports.delimiter == ";"

    def test_rejects_unknown_backend(self):
        """Test backend must be memory or sqlite."""
        with pytest.raises(ValueError):
            StorageSettings(backend="postgres")

    def test_rejects_unknown_error_handler(self):
        """Test encoding_errors must name a codec error handler."""
        with pytest.raises(ValueError):
            ImportSettings(encoding_errors="skip")

    def test_from_line_must_be_positive(self):
        """Test from_line is 1-based."""
        with pytest.raises(ValueError):
            ImportSettings(from_line=0)

    def test_validate_all_settings(self):
        """Test the startup check reports each section."""
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["imports"] is True
        assert results["app"] is True

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test an invalid section is reported, not raised."""
        monkeypatch.setenv("LEDGER_IMPORT_FROM_LINE", "0")
        results = validate_all_settings()
        assert results["imports"] is False
        assert "imports_error" in results


class TestErrors:
    """Application error hierarchy."""

    def test_validation_error_is_app_error(self):
        """Test ValidationError carries a status code."""
        error = ValidationError("Invalid transaction")
        assert isinstance(error, AppError)
        assert error.status_code == 400
        assert error.message == "Invalid transaction"
        assert str(error) == "Invalid transaction"
        assert error.details == {}

    def test_custom_status_and_details(self):
        """Test status code and details are kept."""
        error = AppError("Not found", status_code=404, details={"id": "x"})
        assert error.status_code == 404
        assert error.details["id"] == "x"
