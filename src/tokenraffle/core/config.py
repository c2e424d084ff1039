"""Library configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from tokenraffle.core.constants import DEFAULT_SALE_DURATION_SECONDS, DEFAULT_TICKET_PRICE


class Settings(BaseSettings):
    """tokenraffle settings."""

    # App
    app_env: str = "development"
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # Draw randomness
    entropy_source: str = "secrets"  # "secrets" or "seeded"
    entropy_server_seed: str | None = None  # only read when entropy_source == "seeded"

    # Raffle defaults
    default_ticket_price: int = DEFAULT_TICKET_PRICE
    default_sale_duration_seconds: int = DEFAULT_SALE_DURATION_SECONDS

    # Draw worker
    max_draw_worker_errors: int = 50

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"


def get_settings() -> Settings:
    """Return settings instance."""
    return Settings()
