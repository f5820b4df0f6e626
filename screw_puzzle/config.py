"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, overridable with SCREW_PUZZLE_* variables."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"

    # Stage defaults
    stage_width: float = 600.0
    stage_height: float = 600.0
    hit_radius: float = 15.0

    # Generation
    max_generation_attempts: int = 10
    plate_margin: float = 20.0

    model_config = SettingsConfigDict(
        env_prefix="SCREW_PUZZLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
