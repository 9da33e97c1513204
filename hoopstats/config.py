"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    url: str = Field(..., description="Async SQLAlchemy URL (postgresql+asyncpg or sqlite+aiosqlite)")
    pool_size: int = Field(default=5, description="Database connection pool size")
    max_overflow: int = Field(default=10, description="Connections allowed above pool_size")
    echo: bool = Field(default=False, description="Log every SQL statement")
    create_schema: bool = Field(
        default=True, description="Create missing tables when the API starts"
    )

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    def safe_url(self) -> str:
        """URL with any password masked, suitable for logs."""
        return make_url(self.url).render_as_string(hide_password=True)

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(url={self.safe_url()!r}, pool_size={self.pool_size}, "
            f"max_overflow={self.max_overflow}, echo={self.echo}, "
            f"create_schema={self.create_schema})"
        )

    __str__ = __repr__


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SERVER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    request_timeout: float = Field(
        default=5.0, description="Timeout in seconds for aggregate stat requests"
    )
    api_prefix: str = Field(default="/api/v1", description="Base path for the public API")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    level: str = Field(default="INFO", description="Logging level")
    file: str = Field(default="logs/hoopstats.log", description="Log file path")
    json_output: bool = Field(default=False, description="Render log lines as JSON")


class StatLineLimits(BaseSettings):
    """Upper bounds applied when validating stat lines.

    Fouls are capped at six (a player fouls out on the sixth) and minutes at
    a regulation game's 48. Both are product decisions and can be relaxed
    through STATS_MAX_FOULS / STATS_MAX_MINUTES.
    """

    model_config = SettingsConfigDict(
        env_prefix="STATS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    max_fouls: int = Field(default=6, description="Maximum personal fouls per stat line")
    max_minutes: float = Field(default=48.0, description="Maximum minutes played per stat line")


class Settings(BaseSettings):
    """
    Composed application settings loaded from environment variables.

    Example usage:
        settings = get_settings()
        db_url = settings.database.url
        max_fouls = settings.stat_limits.max_fouls
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    stat_limits: StatLineLimits = Field(default_factory=StatLineLimits)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings; primarily for testing overrides."""
    get_settings.cache_clear()
