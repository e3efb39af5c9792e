"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in code paths)
    - get_settings() is cached (lru_cache) — single instance per process
    - The database name is fixed per deployment and replaces any name in DATABASE_URL
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://campus:campus@db:5432"
    database_name: str = "infinito"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Tokens
    access_token_secret: str = "dev-access-secret"
    refresh_token_secret: str = "dev-refresh-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    # Passwords
    bcrypt_rounds: int = 12

    # Rate limiting (process-local, fixed window)
    password_change_rate_limit: int = 3
    password_change_window_seconds: int = 15 * 60
    general_rate_limit: int = 100
    general_rate_window_seconds: int = 15 * 60

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def database_dsn(self) -> str:
        """DATABASE_URL with its database set to the fixed database name.

        SQLite URLs already name their file and are returned untouched.
        """
        if self.database_url.startswith("sqlite"):
            return self.database_url
        url = make_url(self.database_url).set(database=self.database_name)
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
