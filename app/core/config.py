# app/core/config.py

from typing import List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# project root (two levels above app/core)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    All application settings.
    Values are loaded from environment variables and the project's .env file.
    """

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- application ---
    APP_NAME: str = "StockBill API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Small-business inventory and billing API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for SQL echo and detailed error messages")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # --- database ---
    DATABASE_URL: SecretStr = Field(..., description="Async database URL (postgresql+asyncpg://...)")
    AUTO_CREATE_TABLES: bool = Field(False, description="Run metadata.create_all on startup")

    # --- JWT ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Access token expiration time in minutes")

    # --- ARQ worker (redis) ---
    REDIS_HOST: Optional[str] = Field(None, description="Redis host for the ARQ pool; the pool is skipped when unset")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ pool")

    # --- billing ---
    OVERDUE_DAYS: int = Field(45, description="Age in days after which an unpaid delivered bill counts as overdue")


settings = Settings()
