"""
Module: settings.py
Description: Library configuration using pydantic-settings.

Loads queue defaults and transport settings from YA_SQS_* environment
variables with validation. Supports .env files for local development.
Explicit queue options always take precedence over these values.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueueSettings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="YA_SQS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Override SQS endpoint (local emulators such as ElasticMQ)"
    )

    # Consumer defaults
    wait_time: int = Field(
        default=20,
        ge=0,
        le=20,
        description="Long-poll wait in seconds for each receive call"
    )
    max_messages: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Maximum messages fetched per receive call"
    )

    # Transport retry
    retry_attempts: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Attempts for transient SQS errors before giving up"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator('endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate endpoint override is an HTTP(S) URL."""
        if v is None or v == "":
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError("endpoint_url must be a valid HTTP/HTTPS URL")
        return v


# Global settings instance
settings = QueueSettings()
