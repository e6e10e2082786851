"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
Settings come from environment variables, a .env file and defaults.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from particle_cloud.shared import (
    DEFAULT_API_URL,
    DEFAULT_REQUEST_TIMEOUT,
    EnumEnvironment,
    EnumLogLevel,
)
from particle_cloud.shared.env import load_secret_file_variables


class ParticleSettings(BaseSettings):
    """Particle cloud connection settings."""

    api_url: str = Field(
        default=DEFAULT_API_URL, description="Particle cloud API base URL"
    )
    access_token: str = Field(
        default="",
        description="Access token sent as bearer token",
    )
    timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="PARTICLE_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    particle: ParticleSettings = Field(default_factory=ParticleSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Build the settings from the current environment.

    ``KEY_FILE`` secrets are resolved first so they can feed any field.
    """
    load_secret_file_variables()
    return AppSettings()
