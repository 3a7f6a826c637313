# Settings management (reads env vars/secrets)
# movie_api/core/config.py

import logging
import os
from functools import lru_cache
from typing import List, Optional, Union

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Origins the deployed clients are served from
DEFAULT_CORS_ORIGINS = [
    "http://localhost:8080",
    "http://localhost:4200",
    "http://localhost:1234",
    "https://alinalein.github.io",
    "https://movie-api-lina-834bc70d6952.herokuapp.com",
    "https://myflix-alinalein.netlify.app",
]


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables or .env file.
    """
    # --- Project Info ---
    PROJECT_NAME: str = Field("myFlix Movie API", validation_alias="PROJECT_NAME")
    VERSION: str = Field("1.1.0", validation_alias="APP_VERSION")

    # --- Server ---
    HOST: str = Field("0.0.0.0", validation_alias="HOST")
    PORT: int = Field(8080, validation_alias="PORT")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", validation_alias="LOG_LEVEL")
    ACCESS_LOG_FILE: Optional[str] = Field(None, validation_alias="ACCESS_LOG_FILE")

    # --- Database (MongoDB) ---
    # Use SecretStr to prevent accidental logging of the URI
    MONGODB_URI: SecretStr = Field(..., validation_alias=AliasChoices("MONGODB_URI", "CONNECTION_URI"))
    # Used only when the URI does not name a database
    MONGODB_DB_NAME: str = Field("movies_apiDB", validation_alias="MONGODB_DB_NAME")

    # --- Authentication (JWT) ---
    JWT_SECRET: SecretStr = Field(..., validation_alias="JWT_SECRET")
    JWT_ALGORITHM: str = Field("HS256", validation_alias="JWT_ALGORITHM")
    JWT_EXPIRE_DAYS: int = Field(7, validation_alias="JWT_EXPIRE_DAYS")

    # --- CORS ---
    # Expects a comma-separated string in env var like "http://localhost:3000,https://example.com"
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default=DEFAULT_CORS_ORIGINS,
        validation_alias="BACKEND_CORS_ORIGINS"
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid BACKEND_CORS_ORIGINS format: {v}")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


@lru_cache()
def get_settings() -> Settings:
    """Returns the application settings instance."""
    logger.info("Attempting to load application settings...")
    try:
        settings_instance = Settings()
        logger.info(f"Settings loaded successfully for Project: {settings_instance.PROJECT_NAME}")
        logger.info(f"Log Level: {settings_instance.LOG_LEVEL}")
        logger.info(f"CORS Origins: {settings_instance.BACKEND_CORS_ORIGINS}")
        # DO NOT log SecretStr values directly
        return settings_instance
    except Exception as e:
        logger.critical(f"CRITICAL ERROR: Failed to load application settings: {e}", exc_info=True)
        raise RuntimeError(f"Could not load settings: {e}")


settings: Settings = get_settings()
