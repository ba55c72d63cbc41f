"""Configuration management for the booking calendar engine."""

from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .engine.mappers import DEFAULT_PALETTE, ColorPalette

load_dotenv()


class SupabaseConfig(BaseSettings):
    """Hosted record store (PostgREST) configuration."""

    url: Optional[str] = Field(None, validation_alias="SUPABASE_URL")
    service_key: Optional[str] = Field(None, validation_alias="SUPABASE_SERVICE_ROLE_KEY")
    db_schema: str = Field(default="public", validation_alias="SUPABASE_SCHEMA")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )

    @property
    def rest_url(self) -> Optional[str]:
        if not self.url:
            return None
        return f"{self.url.rstrip('/')}/rest/v1"


class AppConfig(BaseSettings):
    """Application configuration."""

    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    # Store access
    fetch_timeout_seconds: float = Field(
        default=10.0, validation_alias="FETCH_TIMEOUT_SECONDS"
    )

    # Statistics
    stats_window_days: int = Field(default=30, validation_alias="STATS_WINDOW_DAYS")
    business_timezone: str = Field(default="UTC", validation_alias="BUSINESS_TIMEZONE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


class CalendarConfig:
    """Calendar presentation overrides loaded from YAML."""

    def __init__(self, config_path: Path = Path("calendar_config.yaml")):
        self.colors: dict[str, Any] = {}
        self.timezone: Optional[str] = None
        self.stats_window_days: Optional[int] = None

        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            self.colors = data.get("colors") or {}
            self.timezone = data.get("timezone")
            self.stats_window_days = data.get("stats_window_days")

    @property
    def palette(self) -> ColorPalette:
        return DEFAULT_PALETTE.merged(self.colors)

    def resolve_timezone(self, app_config: AppConfig) -> str:
        return self.timezone or app_config.business_timezone

    def resolve_stats_window_days(self, app_config: AppConfig) -> int:
        if self.stats_window_days is not None:
            return self.stats_window_days
        return app_config.stats_window_days


# Global config instances
config = AppConfig()
calendar_config = CalendarConfig()
