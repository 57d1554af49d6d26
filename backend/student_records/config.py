"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default: the service starts with no environment at all
    - get_settings() is cached (lru_cache): single instance per process
    - DATABASE_URL, when set, wins over the DB_* components

Design Decisions:
    - URL built with sqlalchemy URL.create: credentials are escaped, never string-joined
    - aiomysql driver for MySQL: native asyncio, matches the async engine
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = "password"
    db_name: str = "students_db"
    database_url: str | None = None

    # Pool
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0
    db_queue_limit: int = 0  # 0 = unbounded waiters
    db_pool_recycle: int = 3600

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    response_mode: Literal["auto", "html", "json"] = "auto"

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def blank_url_is_unset(cls, v):
        """An empty DATABASE_URL in .env means 'compose from parts'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("db_pool_size")
    @classmethod
    def pool_needs_a_connection(cls, v: int) -> int:
        if v < 1:
            raise ValueError("db_pool_size must be at least 1")
        return v

    def sqlalchemy_url(self) -> URL:
        """Resolve the async SQLAlchemy URL for the configured store."""
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
