"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Settings are read once at process start; there is no hot reload

Design Decisions:
    - Env names match the Actual Budget tooling (ACTUAL_DATA_DIR, ACTUAL_SERVER_URL,
      ACTUAL_PASSWORD, BUDGET_ID) so existing .env files keep working
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    max_body_bytes: int = 10 * 1024 * 1024
    shutdown_timeout_seconds: float = 5.0

    # Actual Budget client
    actual_data_dir: str = "./actual-data"
    actual_server_url: str | None = None
    actual_password: str | None = None
    actual_encryption_password: str | None = None
    actual_verify_ssl: bool = True
    budget_id: str | None = None

    @field_validator(
        "actual_server_url", "actual_password",
        "actual_encryption_password", "budget_id",
        mode="before",
    )
    @classmethod
    def blank_as_unset(cls, v):
        """Treat `BUDGET_ID=` in a .env file the same as an absent variable."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("actual_server_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
