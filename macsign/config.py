"""Configuration management with Pydantic settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CODESIGN_PATH = Path("/usr/bin/codesign")
DEFAULT_SECURITY_PATH = Path("/usr/bin/security")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """macsign configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="MACSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    codesign_path: Path = Field(
        default=DEFAULT_CODESIGN_PATH,
        description="Executable invoked to sign files",
    )

    security_path: Path = Field(
        default=DEFAULT_SECURITY_PATH,
        description="Executable used to query the keychain for signing identities",
    )

    keychain: Path | None = Field(
        default=None,
        description="Restrict identity lookup to this keychain (defaults to the search list)",
    )

    valid_identities_only: bool = Field(
        default=True,
        description="Only list identities the keychain reports as valid",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root logging level for the CLI",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {value!r} (expected one of {list(LOG_LEVELS)})"
            )
        return level


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
