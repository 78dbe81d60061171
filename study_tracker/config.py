"""
Configuration management for the Study Tracker
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///data/study_tracker.db", env="DATABASE_URL"
    )

    # Application Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    debug: bool = Field(default=False, env="DEBUG")
    timezone: str = Field(default="UTC", env="TIMEZONE")

    # Spaced Repetition Configuration
    default_easiness_factor: float = Field(
        default=2.5, ge=1.3, env="DEFAULT_EASINESS_FACTOR"
    )
    min_easiness_factor: float = Field(
        default=1.3, ge=1.3, env="MIN_EASINESS_FACTOR"
    )

    # Analytics Configuration
    weekly_goal_minutes: float = Field(default=300, gt=0, env="WEEKLY_GOAL_MINUTES")
    week_start_day: int = Field(
        default=0, ge=0, le=6, env="WEEK_START_DAY"
    )  # 0 = Monday
    rolling_window_days: int = Field(default=28, ge=0, env="ROLLING_WINDOW_DAYS")
    breakdown_window_days: int = Field(default=7, ge=1, env="BREAKDOWN_WINDOW_DAYS")
    streak_lookback_days: int = Field(default=365, ge=1, env="STREAK_LOOKBACK_DAYS")
    heatmap_weeks: int = Field(default=12, ge=1, env="HEATMAP_WEEKS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_database_path() -> str:
    """Get the database file path from URL"""
    settings = get_settings()
    if settings.database_url.startswith("sqlite:///"):
        return settings.database_url.replace("sqlite:///", "")
    return "data/study_tracker.db"
