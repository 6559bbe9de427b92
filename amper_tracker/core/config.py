"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using a mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/amper_tracker.db"
    return "sqlite:///./amper_tracker.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Amper Tracker"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = _get_default_database_url()

    # Query limits
    RECENT_READINGS_LIMIT: int = 100
    DEFAULT_PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 1000

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
