"""
Configuration Management

Centralized configuration using Pydantic Settings with environment variables.
Supports validation, type checking, and default values.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values should NEVER have defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===================================
    # Application Settings
    # ===================================
    APP_ENV: str = Field(default="production", description="Environment: development, staging, production")
    APP_NAME: str = Field(default="TempBox", description="Application name")
    APP_HOST: str = Field(default="0.0.0.0", description="Host to bind to")
    APP_PORT: int = Field(default=8000, description="Port to bind to")
    APP_DOMAIN: Optional[str] = Field(default=None, description="Public domain (enables trusted host checks)")

    # ===================================
    # Security Keys (REQUIRED)
    # ===================================
    CRON_SECRET: str = Field(..., description="Shared secret for the cleanup trigger (required)")

    # ===================================
    # Mail.tm API
    # ===================================
    MAILTM_BASE_URL: str = Field(default="https://api.mail.tm", description="Mail.tm API base URL")
    MAILTM_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, description="Mail.tm request timeout")
    MAILTM_ADDRESS_LENGTH: int = Field(default=10, ge=6, le=32, description="Random mailbox name length")
    MAILTM_PASSWORD_LENGTH: int = Field(default=16, ge=8, le=64, description="Generated mailbox password length")

    # ===================================
    # Gofile API
    # ===================================
    GOFILE_BASE_URL: str = Field(default="https://api.gofile.io", description="Gofile API base URL")
    GOFILE_API_TOKEN: Optional[str] = Field(default=None, description="Gofile account token used for deletions")
    GOFILE_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, description="Gofile request timeout")

    # ===================================
    # Cleanup Settings
    # ===================================
    CLEANUP_BATCH_SIZE: int = Field(default=5, ge=1, le=100, description="Resource ids deleted per external call")
    CLEANUP_BATCH_DELAY_MS: int = Field(default=1000, ge=0, description="Pause between deletion batches")
    CLEANUP_SCHEDULE_ENABLED: bool = Field(default=False, description="Run sweeps on a timer inside the app")
    CLEANUP_INTERVAL_MINUTES: int = Field(default=60, ge=1, description="Scheduled sweep interval in minutes")
    EXPIRING_SOON_WINDOW_MINUTES: int = Field(default=60, ge=1, description="Default early-warning window")

    # ===================================
    # Rate Limiting
    # ===================================
    RATE_LIMIT_REQUESTS: int = Field(default=8, ge=1, description="Requests allowed per window per IP")
    RATE_LIMIT_WINDOW_MS: int = Field(default=1000, ge=1, description="Rate limit window length")

    # ===================================
    # Logging Configuration
    # ===================================
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(default=None, description="Log file path")

    # ===================================
    # Security Headers
    # ===================================
    ENABLE_CORS: bool = Field(default=True, description="Enable CORS")
    CORS_ORIGINS: List[str] = Field(default=["*"], description="Allowed CORS origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False, description="Allow credentials in CORS")
    CSP_ENABLED: bool = Field(default=True, description="Enable Content Security Policy")

    # ===================================
    # Monitoring
    # ===================================
    ENABLE_METRICS: bool = Field(default=True, description="Enable Prometheus metrics")

    # ===================================
    # Validators
    # ===================================

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("MAILTM_BASE_URL", "GOFILE_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalize API base URLs."""
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("APP_ENV")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "staging", "production"]
        v = v.lower()
        if v not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v

    # ===================================
    # Computed Properties
    # ===================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"

    @property
    def cleanup_batch_delay_seconds(self) -> float:
        """Get the inter-batch pause in seconds."""
        return self.CLEANUP_BATCH_DELAY_MS / 1000

    @property
    def cleanup_interval_seconds(self) -> int:
        """Get the scheduled sweep interval in seconds."""
        return self.CLEANUP_INTERVAL_MINUTES * 60


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.

    Returns:
        Settings: Application settings
    """
    return Settings()
