"""
Configuration Management for Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which storage backend and import options are in
use, and ensures configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="memory",
        pattern="^(memory|sqlite)$",
        description="Storage backend to use"
    )
    database_path: str = Field(
        default="ledger.db",
        description="Path to the SQLite database file"
    )

    @field_validator('database_path')
    @classmethod
    def validate_database_path(cls, v: str) -> str:
        """Warn if the database directory doesn't exist (it is not created for you)."""
        parent = Path(v).parent
        if v != ":memory:" and not parent.exists():
            import warnings
            warnings.warn(
                f"Database directory not found at {parent}. "
                "Make sure it exists before running the application."
            )
        return v


class ImportSettings(BaseSettings):
    """CSV import configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_IMPORT_",
        extra="ignore"
    )

    delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="CSV field delimiter"
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding of imported files"
    )
    # Undecodable bytes become U+FFFD instead of aborting the import
    encoding_errors: str = Field(
        default="replace",
        pattern="^(strict|replace|ignore|surrogateescape|backslashreplace)$",
        description="Codec error handler used when decoding imported files"
    )
    # Line 1 is the header
    from_line: int = Field(
        default=2,
        ge=1,
        description="First line of the file parsed as data (1-based)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level for the local structured log"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def imports(self) -> ImportSettings:
        return ImportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "imports", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
