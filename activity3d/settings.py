from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from activity3d.core.calendar import MAX_WINDOW_DAYS


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    `GITHUB_TOKEN` is optional; without it only public contributions are
    reported by GitHub.
    """

    github_graphql_url: str = "https://api.github.com/graphql"
    github_token: str | None = None
    user_agent: str = "activity3d"
    request_timeout_seconds: float = Field(default=20.0, gt=0)
    activity_window_days: int = Field(default=360, ge=0, le=MAX_WINDOW_DAYS)
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
