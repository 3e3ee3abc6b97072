"""Application configuration using Pydantic settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pigs.constants import MAX_PLAYERS, MIN_PLAYERS, PENALTY_THRESHOLD


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime
    environment: str = Field(default="development", description="Environment")
    log_level: str = Field(default="INFO", description="Root log level for entry points")

    # Game Configuration
    penalty_threshold: int = Field(
        default=PENALTY_THRESHOLD, description="Score at which the game ends"
    )
    min_players: int = Field(default=MIN_PLAYERS, description="Minimum participants per game")
    max_players: int = Field(default=MAX_PLAYERS, description="Maximum participants per game")
    row_choice_timeout_seconds: float = Field(
        default=30.0, description="Seconds before a stalled row choice gets the default row"
    )
    random_seed: Optional[int] = Field(default=None, description="Seed for reproducible deals")

    # Bot Configuration
    default_bot_strategy: str = Field(default="rule_based", description="Default bot strategy")


# Global settings instance
settings = Settings()
