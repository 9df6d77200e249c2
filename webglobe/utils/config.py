"""
Configuration management using Pydantic Settings
Loads and validates environment variables from .env file
"""

import os
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Webglobe client settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Webglobe API Configuration
    webglobe_api_url: str = Field(
        default="https://api.webglobe.com",
        description="Base URL of the Webglobe REST API"
    )
    webglobe_login: str = Field(
        ...,
        description="Webglobe account login"
    )
    webglobe_password: str = Field(
        ...,
        description="Webglobe account password"
    )
    webglobe_currency: str = Field(
        default="CZK",
        description="Currency used for price queries and orders"
    )

    # HTTP Configuration
    webglobe_connect_timeout: float = Field(
        default=60,
        gt=0,
        description="Connect timeout in seconds"
    )
    webglobe_total_timeout: float = Field(
        default=90,
        gt=0,
        description="Total time allowed for one exchange, in seconds"
    )
    webglobe_refresh_margin: int = Field(
        default=600,
        ge=0,
        description="Refresh the token when it expires within this many seconds"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("webglobe_login", "webglobe_password")
    @classmethod
    def validate_credentials(cls, v: str) -> str:
        """Reject empty or placeholder credentials"""
        if not v or v in ("your_login_here", "your_password_here"):
            raise ValueError(
                "Webglobe credentials must be set in .env file. "
                "Copy .env.example to .env and add your actual login and password."
            )
        return v

    @field_validator("webglobe_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get or create the settings singleton instance.
    Loads configuration from .env file (or the process environment) on first call.

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If neither .env nor WEBGLOBE_LOGIN is available
        ValidationError: If required environment variables are missing or invalid
    """
    global _settings

    if _settings is None:
        env_file = Path(".env")
        if not env_file.exists() and "WEBGLOBE_LOGIN" not in os.environ:
            raise FileNotFoundError(
                ".env file not found. Please copy .env.example to .env and "
                "configure your Webglobe API credentials."
            )

        _settings = Settings()

    return _settings


def reset_settings():
    """
    Reset the settings singleton (useful for testing)
    """
    global _settings
    _settings = None
