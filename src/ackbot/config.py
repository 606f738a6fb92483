"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""

    # Scheduler (shared secret sent as X-Ackbot-Verify)
    ackbot_verify: str = ""

    # Retry queue
    redis_url: str = ""  # empty -> in-memory store
    retry_queue_key: str = "ackbot:pending"
    reminder_frequency_seconds: int = 3600
    reschedule_failed_checks: bool = False

    # Acknowledgement engine
    concurrency: int = 3
    ack_emoji: str = "thumbsup"
    max_block_depth: int = 50
    debug_log_to_slack: bool = False

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
