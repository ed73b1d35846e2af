"""Configuration management for PrintTrack."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from printtrack.maintenance.models import RemainingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRINTTRACK_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default=Path("data"), description="Data directory for the local database")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///data/printtrack.db",
        description="Database connection URL",
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Web server
    web_host: str = Field(default="127.0.0.1", description="Web server host")
    web_port: int = Field(default=9880, description="Web server port")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:9880",
        description="Comma separated list of allowed CORS origins",
    )

    # Auth
    jwt_secret_key: str = Field(default="dev-secret-key-change-in-production", description="JWT signing key")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60 * 24, description="Access token lifetime")

    # OctoPrint
    octoprint_timeout: float = Field(default=5.0, description="OctoPrint request timeout in seconds")

    # Maintenance display
    remaining_policy: RemainingPolicy = Field(
        default=RemainingPolicy.TRUE_REMAINING,
        description="Remaining usage display policy: true_remaining or reset_on_log",
    )

    # CLI
    default_user: Optional[str] = Field(default=None, description="Owner id used by the CLI when --user is omitted")
    log_level: str = Field(default="INFO", description="Logging level")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Settings) -> None:
    """Override global settings."""
    global _settings
    _settings = settings
