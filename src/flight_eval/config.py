"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = "Flight Search Evaluation"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Dataset
    dataset_path: str = "data/sample-flights.json"
    airports_path: str | None = "data/airports.json"
    airlines_path: str | None = None

    # Evaluation
    extraction_store_dir: str = "evaluation_outputs"
    scoring_policy_path: str | None = None  # JSON overrides, defaults if unset
    default_sample_size: int = 10
    evaluation_max_workers: int = 1

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
