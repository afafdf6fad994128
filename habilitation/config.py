"""Application configuration."""
from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from habilitation.grids.researcher.loaders import DEFAULT_DATA_ROOT


class Settings(BaseSettings):
    """Calculator settings, overridable through the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HABILITATION_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "University Qualification Calculator API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Evaluation grid
    GRID_DATA_DIR: str = DEFAULT_DATA_ROOT
    LANGUAGE: Literal["ar", "en"] = "ar"

    # Eligibility thresholds (regulation values)
    MIN_TEACHING_YEARS: int = Field(default=3, ge=0)
    MIN_TOTAL_POINTS: float = Field(default=350, ge=0)

    # Transport
    COMPUTE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, le=120)
    CORS_ALLOW_ORIGINS: List[str] = Field(default=["*"])


@lru_cache
def get_settings() -> Settings:
    return Settings()
