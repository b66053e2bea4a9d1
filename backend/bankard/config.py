"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - No credentials in settings: the session token lives in the Session Holder
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - use_fixtures is only the initial gateway mode; it can be flipped at runtime
    - Defaults provided for every setting: works out-of-the-box in fixture mode
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bankard.core.domain_types import Locale


class Settings(BaseSettings):
    """Application settings from environment variables (prefix BANKARD_)."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="BANKARD_", case_sensitive=False,
    )

    # Backend
    api_base_url: str = "https://api-bifrost-hml.acgsa.com.br"
    login_base_url: str = "https://localhost:7162"
    request_timeout_seconds: float = 30.0

    @field_validator("api_base_url", "login_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Fixture mode
    use_fixtures: bool = False
    fixture_latency_ms: int = 800

    # Persistence (credential + last selection); PostgreSQL via the postgres extra
    database_url: str = "sqlite+aiosqlite:///bankard.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_driver_url(cls, v: str) -> str:
        """Plain sqlite:// and postgresql:// URLs need their async drivers."""
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # User-facing error language
    locale: Locale = Locale.PT_BR

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
