"""Connection and logging settings loaded from environment variables via pydantic-settings."""

from __future__ import annotations

import sqlalchemy as sa
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedsync.errors import ConfigError

PASSWORD_ENV = "POSTGRES_PASSWORD"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FEEDSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "mattermost"
    db_name: str = "mattermost"
    db_sslmode: str = "disable"
    # Full URL override; skips the password requirement (tests, sqlite)
    database_url: str = ""
    # Secret, must be an env var
    postgres_password: str = Field(default="", validation_alias=AliasChoices(PASSWORD_ENV, "FEEDSYNC_POSTGRES_PASSWORD"))
    log_dir: str = ""
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def sqlalchemy_url(self) -> str:
        """Database URL for SQLAlchemy. Raises ConfigError when no credential is available."""
        if self.database_url:
            return self.database_url
        if not self.postgres_password:
            raise ConfigError(f"{PASSWORD_ENV} needs to be set")
        url = sa.engine.URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.postgres_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"sslmode": self.db_sslmode},
        )
        return url.render_as_string(hide_password=False)
