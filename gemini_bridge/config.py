"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Gemini Bridge"
    DEBUG: bool = False

    # Upstream Gemini Config
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_API_KEY: str | None = None
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 600

    # Safety Config
    # Used when the request body does not carry `isSafetyEnabled`.
    # When disabled, system prompts are sent as user turns and safety filters are relaxed.
    SAFETY_ENABLED_DEFAULT: bool = True

    # KV Store Config
    # KV store backend: "database" uses the SQL database, "redis" uses Redis
    KV_STORE_TYPE: Literal["database", "redis"] = "database"
    # Namespace isolating this deployment's keys inside the shared store
    KV_NAMESPACE: str = "gemini_bridge"
    # SQLAlchemy async connection string (only used when KV_STORE_TYPE is "database")
    DATABASE_URL: str = "sqlite+aiosqlite:///./gemini_bridge.db"
    # Redis connection URL (only used when KV_STORE_TYPE is "redis")
    REDIS_URL: str = "redis://localhost:6379/0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
