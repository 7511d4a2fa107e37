"""
Configuration Management for the Risk Scoring Service

Environment-based configuration using Pydantic Settings.
"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CAREON_",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "CareOn Risk Scoring Service"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level for the careon logger")

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # Assessment behaviour
    strict_validation: bool = Field(
        default=False,
        description="Reject implausible numeric answers instead of dropping them"
    )
    include_specialists: bool = Field(
        default=True,
        description="Attach specialist referrals to assessment responses"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
