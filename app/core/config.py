import json
import logging
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be configured via .env file or environment variables.
    """

    # =============================================================================
    # APPLICATION
    # =============================================================================
    PROJECT_NAME: str = "Student Marks API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # =============================================================================
    # SERVER
    # =============================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # =============================================================================
    # NOTIFICATIONS
    # =============================================================================
    # Kết quả hiển thị tự ẩn sau N giây
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0

    # =============================================================================
    # CORS
    # =============================================================================
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: str = "INFO"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("NOTIFICATION_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("NOTIFICATION_TIMEOUT_SECONDS must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )


# Create global settings instance
settings = Settings()


# Helper function to display current config (for debugging)
def print_config():
    """Print current configuration."""
    print("=" * 80)
    print("CURRENT CONFIGURATION")
    print("=" * 80)
    print(f"Project Name: {settings.PROJECT_NAME}")
    print(f"Version: {settings.APP_VERSION}")
    print(f"Debug Mode: {settings.DEBUG}")
    print(f"API Prefix: {settings.API_V1_PREFIX}")
    print("-" * 80)
    print(f"Server: {settings.HOST}:{settings.PORT}")
    print(f"CORS Origins: {', '.join(settings.BACKEND_CORS_ORIGINS)}")
    print(f"Notification Timeout: {settings.NOTIFICATION_TIMEOUT_SECONDS}s")
    print(f"Log Level: {settings.LOG_LEVEL}")
    print("=" * 80)


if __name__ == "__main__":
    # Test config loading
    print_config()
