"""
Configuration settings for the Weight Progress backend.
Uses pydantic-settings for type-safe environment variable management.
"""
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Info
    app_name: str = "Weight Progress API"
    app_version: str = "1.0.0"
    git_commit: Optional[str] = None  # Git commit hash from environment
    build_date: Optional[str] = None  # Build timestamp from environment
    debug: bool = False
    log_level: str = "INFO"

    # Database (read-only access to the hosted store)
    database_url: str = "sqlite:///./progress.db"

    # CORS - comma-separated list in environment variable
    # Example: CORS_ORIGINS="http://localhost:5173,http://localhost:3000"
    cors_origins_str: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        validation_alias="CORS_ORIGINS"
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Trend analysis
    stable_threshold: float = 1.0  # |change| over the last 5 entries still considered stable
    trend_window: int = 5

    # Achievement rules
    goal_tolerance: float = 0.5  # same unit as the weights being compared
    milestone_percents: List[int] = [25, 50, 75]
    weight_loss_thresholds: List[int] = [5, 10, 15, 20, 25]
    streak_goal_days: int = 7

    # Pydantic v2 settings config
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars so unexpected keys don't crash
    )


# Global settings instance
settings = Settings()
