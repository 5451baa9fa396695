"""Application configuration management."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Persistent store (memory store is used when no database is configured)
    DATABASE_URL: Optional[str] = None
    STORE_TABLE: str = "election_store"

    # Remote time service
    TIME_SERVICE_URL: str = "https://worldtimeapi.org/api/timezone/Asia/Kolkata"
    CLOCK_REFRESH_SECONDS: float = 60.0
    CLOCK_TIMEOUT_SECONDS: float = 5.0
    COUNTDOWN_TICK_SECONDS: float = 1.0

    # Election window
    VOTING_DURATION_HOURS: int = 3

    # Registration rules
    UNIVERSITY_EMAIL_DOMAIN: str = "mallareddyuniversity.ac.in"
    PASSWORD_MIN_LENGTH: int = 6

    # Default administrator created by the store bootstrap
    ADMIN_STUDENT_ID: str = "ADMIN001"
    ADMIN_NAME: str = "System Administrator"
    ADMIN_EMAIL: str = "admin@mallareddyuniversity.ac.in"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_DEPARTMENT: str = "Administration"

    # Environment
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def voting_duration_ms(self) -> int:
        """Length of a (re)started voting window in milliseconds."""
        return self.VOTING_DURATION_HOURS * 60 * 60 * 1000


settings = Settings()


def get_settings() -> Settings:
    return settings
