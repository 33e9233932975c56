"""
Configuration management for the feedback intake and notification backend.

Every value can be overridden through environment variables or a ``.env``
file. Secrets must be provided explicitly in production.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "dev-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = "sqlite:///./feedback.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    log_sql_queries: bool = False

    # JWT Authentication - MUST be overridden in production
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    cors_origins: List[str] = ["http://localhost:3000"]

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Feedback intake
    feedback_rating_min: float = 1.0
    feedback_rating_max: float = 5.0
    # 1.0 for whole-star deployments, 0.1 for decimal ratings
    feedback_rating_step: float = 1.0
    feedback_comment_max_length: int = 2000
    feedback_rate_limit_enabled: bool = Field(
        default=True,
        description="One feedback per (business, IP) per window when enabled",
    )
    feedback_rate_limit_window_hours: int = 24

    # Critical keyword detection
    critical_keywords_path: Optional[str] = Field(
        default=None,
        description="Override path to the critical keyword lexicon (JSON)",
    )
    critical_keywords_message_limit: int = 3

    # Notifications
    notifications_default_page_size: int = 20
    notifications_max_page_size: int = 100

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("feedback_rating_step")
    @classmethod
    def validate_rating_step(cls, v):
        if v <= 0:
            raise ValueError("feedback_rating_step must be positive")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure secrets and bounds are sane for the current environment."""
        if self.is_production and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError(
                "JWT_SECRET_KEY must be set to a secure value in production"
            )
        if self.feedback_rating_min >= self.feedback_rating_max:
            raise ValueError("feedback_rating_min must be below feedback_rating_max")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


settings = get_settings()
