"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets and connection strings come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - database_url has no default: startup fails fast when it is absent

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Missing database_url is reported by require_database_url() as ConfigurationError
      instead of failing at import, so tooling can import the package without a database
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fedlink.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    create_schema_on_startup: bool = True

    # Sessions
    session_cookie_name: str = "fedlink_sid"
    session_ttl_hours: int = 24 * 7
    session_reap_interval_seconds: int = 3600
    cookie_secure: bool = False

    # Federation documents
    public_domain: str = "localhost:8000"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def require_database_url(self) -> str:
        if not self.database_url:
            raise ConfigurationError("DATABASE_URL environment variable is not set")
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    return Settings()
