"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
PRODUCTION_FALLBACK_URL = "https://your-domain.com"


class Settings(BaseSettings):
    # Environment: "production" switches URL composition to BASE_URL
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV", "environment"),
    )
    base_url: Optional[str] = None
    port: int = 5000

    # Uploads
    upload_root: str = "uploads"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # App
    log_level: str = "INFO"

    @field_validator("max_file_size")
    @classmethod
    def check_max_file_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("MAX_FILE_SIZE must be a positive number of bytes")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def public_base_url(self) -> str:
        """Base URL that stored files are served from."""
        if self.is_production:
            return (self.base_url or PRODUCTION_FALLBACK_URL).rstrip("/")
        return f"http://localhost:{self.port}"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
