from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Settings for the quiz grading engine loaded from env / .env.

    Notes:
        - Every variable is prefixed with `QUIZ_`, e.g. `QUIZ_LOG_LEVEL=DEBUG`.
        - Scoring rules themselves live on the questions, not here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QUIZ_",
        extra="ignore",
    )

    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    JSON_LOGS: bool = Field(default=False, description="Emit single-line JSON logs")
    METRICS_ENABLED: bool = Field(default=True, description="Record Prometheus metrics")
    FEEDBACK_MAX_CHARS: int = Field(
        default=30, ge=1, description="Width at which item texts are cut in ordering feedback"
    )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance."""
    return Settings()
