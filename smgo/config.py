"""
smgo Configuration

Settings loaded with pydantic-settings. Environment variables use the
SMGO_ prefix, e.g. SMGO_PRINT_BLOCKS=1 or SMGO_LOG_LEVEL=DEBUG.

Usage:
    from smgo.config import settings

    settings.print_blocks = True
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """smgo process-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMGO_",
        extra="ignore",
        validate_assignment=True,
    )

    print_blocks: bool = Field(default=False, description="Print the resolved block sequence of every parse")
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console", description="Log output format")


settings = Settings()
