"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from pathlib import Path

# Get the base directory
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO")

    # API Configuration
    api_title: str = Field(default="Time Sheet Approvals")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'timesheets.db'}",
        description="SQLAlchemy database URL"
    )
    database_echo: bool = Field(default=False)

    # JWT Configuration
    jwt_secret_key: str = Field(default="development-secret-key-change-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")

    # CORS
    cors_origins: str | List[str] = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allow_credentials: bool = Field(default=True)

    # Approval workflow
    system_actor_id: str = Field(default="system", description="Actor id recorded for automatic transitions")
    auto_approval_enabled: bool = Field(default=False, description="Run the auto-approval sweep in the background")
    auto_approval_interval_seconds: int = Field(default=3600, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return list(DEFAULT_CORS_ORIGINS)
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def validate_environment(self) -> None:
        """Validate settings that must not keep their development defaults."""
        problems: List[str] = []
        if self.jwt_secret_key.startswith("development-"):
            problems.append("JWT_SECRET_KEY")
        if not self.system_actor_id:
            problems.append("SYSTEM_ACTOR_ID")

        if problems:
            raise ValueError(
                f"Missing or insecure environment variables: {', '.join(problems)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings

