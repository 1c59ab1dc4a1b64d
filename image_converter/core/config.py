import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    PROJECT_NAME: str = "Image Converter"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./database.db")
    UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "./uploads")
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB
    HISTORY_LIMIT: int = 10
    CONVERT_RATE_LIMIT: str = "30/minute"
    CORS_ORIGINS: List[str] = ["*"]
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    @field_validator("MAX_UPLOAD_SIZE", "HISTORY_LIMIT")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v


settings = Settings()
