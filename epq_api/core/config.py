"""
Application configuration.

Centralized configuration management with environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from epq.answer import ValidationPolicy


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Exam Practice Answer Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API
    API_PREFIX: str = "/api/v1"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None
    LOG_MAX_STRING_LENGTH: int = 1000

    # Grading
    NUMERIC_TOLERANCE: float = 1e-4
    STRICT_UNKNOWN_TYPES: bool = False
    DIAGNOSTIC_SNIPPET_LENGTH: int = 100

    # Import
    STRICT_IMPORTS: bool = False

    def validation_policy(self) -> ValidationPolicy:
        """Engine policy built from the grading settings"""
        return ValidationPolicy(
            numeric_tolerance=self.NUMERIC_TOLERANCE,
            strict_unknown_types=self.STRICT_UNKNOWN_TYPES,
            snippet_length=self.DIAGNOSTIC_SNIPPET_LENGTH,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
