from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Translation Review API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database (environment first, .env file as fallback)
    DATABASE_URL: str = "sqlite+aiosqlite:///./translation_review.db"
    DATABASE_ECHO: bool = False

    # Security
    PASSWORD_SCHEME: str = "plaintext"  # plaintext | pbkdf2_sha256

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
