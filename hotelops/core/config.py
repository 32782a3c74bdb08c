"""
Configuration Management

Centralized configuration management using Pydantic Settings for type safety
and environment variable integration.
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class DatabaseSettings(BaseSettings):
    """Database configuration settings"""

    DATABASE_URL: str = Field(default="sqlite:///./hotelops.db")
    DB_ECHO: bool = Field(default=False)
    DB_POOL_PRE_PING: bool = Field(default=True)

    # Seconds a writer waits on a locked SQLite database before failing
    DB_SQLITE_TIMEOUT: int = Field(default=30)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


class LoggingSettings(BaseSettings):
    """Logging configuration settings"""

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text
    LOG_FILE: Optional[str] = Field(default=None)

    # Structured logging
    ENABLE_STRUCTURED_LOGGING: bool = Field(default=True)
    LOG_SQL_QUERIES: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class WorkflowSettings(BaseSettings):
    """Approval routing and escalation configuration"""

    # Hard stop for reporting-chain walks, independent of cycle detection
    WORKFLOW_MAX_ESCALATION_DEPTH: int = Field(default=20, ge=1)

    # Used by the escalation sweep when an entity type has no rule
    WORKFLOW_DEFAULT_ESCALATION_HOURS: int = Field(default=48, ge=1)

    # Requests younger than this are never looked at by the sweep
    WORKFLOW_MIN_PENDING_HOURS: int = Field(default=1, ge=0)

    WORKFLOW_MAX_DELEGATION_DAYS: int = Field(default=90, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Main application settings"""

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    TESTING: bool = Field(default=False)

    # Project information
    PROJECT_NAME: str = Field(default="Hotel Operations Approvals")
    PROJECT_VERSION: str = Field(default="1.0.0")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()


__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "WorkflowSettings",
    "Settings",
    "get_settings",
    "settings",
]
