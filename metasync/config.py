"""Configuration loading for metasync.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Salesforce connection
    salesforce_username: str = Field(
        default="",
        description="Salesforce username",
    )
    salesforce_password: str = Field(
        default="",
        description="Salesforce password",
    )
    salesforce_token: str = Field(
        default="",
        description="Salesforce security token appended to the password",
    )
    salesforce_sandbox: bool = Field(
        default=False,
        description="Log in through the sandbox login host",
    )
    salesforce_api_version: str = Field(
        default="47.0",
        description="Salesforce API version",
    )
    salesforce_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout of each Salesforce HTTP request in seconds",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("salesforce_api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """Ensure the API version looks like '47.0'."""
        if not re.fullmatch(r"\d+\.0", v):
            raise ValueError("salesforce_api_version must look like '47.0'")
        return v

    @field_validator("salesforce_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Ensure request timeout is positive."""
        if v <= 0:
            raise ValueError("salesforce_timeout_seconds must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
