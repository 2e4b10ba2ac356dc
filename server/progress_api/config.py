"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from progress_engine import ReportOptions, TrendPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="PROGRESS_")

    # Storage
    data_path: str = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    history_backend: Literal["sqlite", "memory"] = "sqlite"
    history_db_path: Optional[str] = None

    @property
    def history_db_file(self) -> str:
        return self.history_db_path or os.path.join(self.data_path, "progress_history.db")

    # Report engine
    timezone: str = "UTC"
    daily_window: int = Field(default=7, ge=1)
    weekly_window: int = Field(default=4, ge=1)
    monthly_window: int = Field(default=3, ge=1)
    trend_threshold: float = Field(default=0.5, ge=0)
    invalid_entry_policy: Literal["fail", "skip"] = "fail"

    # Narrative gateway (summary / recommendations / trend text)
    narrative_gateway_url: Optional[str] = None
    narrative_timeout: float = 60.0

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8083

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    def report_options(self) -> ReportOptions:
        """Engine options derived from these settings."""
        return ReportOptions(
            tz=self.timezone,
            daily_window=self.daily_window,
            weekly_window=self.weekly_window,
            monthly_window=self.monthly_window,
            trend_policy=TrendPolicy(threshold=self.trend_threshold),
            invalid_entry_policy=self.invalid_entry_policy,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
