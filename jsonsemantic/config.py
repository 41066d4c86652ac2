"""
Service settings with environment variable support.

The library functions never read these; only the HTTP surface does.
"""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .normalize import NormalizationPolicy
from .rules import DEFAULT_MAX_DEPTH, DEFAULT_OPTIONAL_FIELDS, MAX_DEPTH_CEILING


class Settings(BaseSettings):
    """Application settings, overridable via JSONSEM_* variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="JSONSEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application Info
    APP_NAME: str = "json-semantic-equality"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Comparison
    # JSON list in the environment, e.g. JSONSEM_OPTIONAL_FIELDS='["disabled","notes"]'
    OPTIONAL_FIELDS: List[str] = sorted(DEFAULT_OPTIONAL_FIELDS)
    MAX_DEPTH: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_CEILING)

    # Maximum upload size in bytes (10MB default)
    MAX_REQUEST_SIZE: int = 10 * 1024 * 1024

    def policy(self) -> NormalizationPolicy:
        return NormalizationPolicy(frozenset(self.OPTIONAL_FIELDS))


settings = Settings()
