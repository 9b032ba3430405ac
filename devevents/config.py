"""Application configuration via environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    # Required. Absence is a fatal startup condition (see database.ConnectionCache).
    DATABASE_URL: Optional[str] = None
    DATABASE_CONNECT_TIMEOUT: float = 10.0
    DATABASE_ECHO: bool = False
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
