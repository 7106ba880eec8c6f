from datetime import UTC, datetime
from pathlib import Path

from pydantic_settings import BaseSettings


def utcnow() -> datetime:
    """Current time as naive UTC, the form every stored timestamp uses."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class Settings(BaseSettings):
    app_name: str = "StudyHub"
    database_url: str = f"sqlite+aiosqlite:///{Path(__file__).resolve().parent.parent / 'data' / 'studyhub.db'}"
    debug: bool = False
    log_level: str = "INFO"
    default_ease_factor: float = 2.5
    max_due_cards: int = 50

    model_config = {"env_prefix": "STUDYHUB_", "env_file": ".env"}


settings = Settings()
