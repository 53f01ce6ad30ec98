"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "WanderSphere"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./wandersphere.db"
    DB_ECHO: bool = False

    # JWT
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173", "http://localhost:8080"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Response cache
    CACHE_DEFAULT_TTL_SECONDS: int = 5 * 60
    CACHE_MAX_ENTRIES: int = 50
    CACHE_STALE_SECONDS: int = 2 * 60

    # Social
    STORY_DEFAULT_DURATION_HOURS: int = 24
    MAX_PAGE_SIZE: int = 50

    # Wallet
    WALLET_CURRENCY: str = "INR"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
