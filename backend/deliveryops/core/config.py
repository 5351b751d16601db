"""
Application configuration using Pydantic Settings.

Environment-based behaviour switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test", "production"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./deliveryops.db"

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # Front-end URL used to build links in outgoing emails
    APP_BASE_URL: str = "http://localhost:5173"

    # ===========================================
    # Deadline alerts job
    # ===========================================
    DEADLINE_ALERTS_ENABLED: bool = True
    DEADLINE_ALERTS_INTERVAL_MINUTES: int = Field(default=60, ge=1)
    DEADLINE_ALERTS_RUN_ON_STARTUP: bool = True
    ALERT_BATCH_SIZE: int = Field(default=100, ge=1)

    # True: sent_at is only stamped once every required channel delivered.
    # False: legacy behaviour, an email failure is logged and the alert is still sent.
    ALERT_REQUIRE_ALL_CHANNELS: bool = True

    # ===========================================
    # Email
    # ===========================================
    # Email provider: "log" | "webhook"
    # - log: render and log the reminder only (local development)
    # - webhook: POST the reminder to an HTTP mail relay
    EMAIL_PROVIDER: Literal["log", "webhook"] = "log"
    EMAIL_WEBHOOK_URL: str = ""
    EMAIL_WEBHOOK_TOKEN: str = ""
    EMAIL_FROM: str = "noreply@deliveryops.local"
    EMAIL_SEND_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # ===========================================
    # Default milestone plan (days after project start)
    # ===========================================
    MILESTONE_DAYS_TO_AUDIT: int = 3
    MILESTONE_DAYS_TO_V1: int = 10
    MILESTONE_DAYS_TO_V2: int = 17
    MILESTONE_DAYS_TO_IMPLEMENTATION: int = 21
    MILESTONE_DAYS_TO_CLIENT_FEEDBACK: int = 25
    MILESTONE_DAYS_TO_FINAL_VERSION: int = 30

    @property
    def is_test(self) -> bool:
        """Check if running under the test environment."""
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
