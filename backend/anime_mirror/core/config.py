"""Configuration management using pydantic-settings."""
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini credential (required)
    api_key: str = Field(validation_alias=AliasChoices("gemini_api_key", "api_key"))

    # Application settings
    app_name: str = "anime-mirror"

    # Server settings
    host: str = "localhost"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
