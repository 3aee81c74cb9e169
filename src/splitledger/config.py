"""Configuration management for SplitLedger."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Record store
    ledger_path: Path = Path.home() / ".splitledger" / "ledger.json"

    # Member whose dashboard is shown when none is given
    member_id: str | None = None

    # Groups operate in one nominal currency; used for display only
    default_currency: str = "USD"

    # Analytics
    monthly_window_months: int = Field(default=6, ge=1, le=24)

    log_level: str = "WARNING"


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the SPLITLEDGER_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
