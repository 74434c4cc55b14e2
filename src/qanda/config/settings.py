"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures all application settings from environment variables with
validation and defaults. Supports .env files for local development.
"""

import re
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("local", "dynamodb")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Q&A API", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    stage: str = Field(default="dev", description="Deployment stage")

    # Storage settings
    storage_backend: str = Field(
        default="local",
        description="Storage backend: 'local' (in-process) or 'dynamodb'"
    )
    events_table_name: str = Field(
        default="events",
        description="Name of the DynamoDB events table"
    )
    questions_table_name: str = Field(
        default="questions",
        description="Name of the DynamoDB questions table"
    )
    dynamodb_endpoint_url: Optional[str] = Field(
        default=None,
        description="Override DynamoDB endpoint (e.g. DynamoDB Local)"
    )
    seed_fixture: Optional[str] = Field(
        default=None,
        description="Path to a JSON fixture seeding the local store"
    )
    toggle_max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Compare-and-set attempts for a contended toggle"
    )

    # HTTP settings
    max_body_bytes: int = Field(
        default=512,
        ge=64,
        description="Maximum accepted request body size in bytes"
    )

    @field_validator('events_table_name', 'questions_table_name')
    @classmethod
    def validate_table_names(cls, v: str) -> str:
        """Validate DynamoDB table names."""
        if not v or not isinstance(v, str):
            raise ValueError("Table name must be a non-empty string")

        if not re.match(r'^[a-zA-Z0-9_.-]{3,255}$', v):
            raise ValueError(
                "Table name must be 3-255 letters, numbers, dots, hyphens, or underscores"
            )

        return v

    @field_validator('storage_backend')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Validate the storage backend is one we can build."""
        if v.lower() not in STORAGE_BACKENDS:
            raise ValueError(f"storage_backend must be one of: {', '.join(STORAGE_BACKENDS)}")
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
